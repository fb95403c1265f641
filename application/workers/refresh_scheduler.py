import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime, time, timedelta

from application.services.exchange_rate_service import ExchangeRateService

logger = logging.getLogger(__name__)


class RefreshScheduler:
	"""
	Background task that rebuilds the exchange rate dataset once a day.

	The Bundesbank publishes new daily rates overnight, so the default run time
	is shortly after midnight. A failed refresh is logged and the previous
	snapshot keeps being served until the next run.
	"""

	def __init__(
		self,
		service: ExchangeRateService,
		refresh_time: time = time(0, 5),
		clock: Callable[[], datetime] = datetime.now,
	):
		self.service = service
		self.refresh_time = refresh_time
		self._clock = clock
		self._task: asyncio.Task | None = None
		self.is_running = False

	def seconds_until_next_run(self, now: datetime | None = None) -> float:
		now = now or self._clock()
		next_run = datetime.combine(now.date(), self.refresh_time, tzinfo=now.tzinfo)
		if next_run <= now:
			next_run += timedelta(days=1)
		return (next_run - now).total_seconds()

	async def trigger(self) -> bool:
		"""Run one refresh. Returns True if a new snapshot was published."""
		try:
			return await self.service.refresh_now()
		except Exception as e:
			logger.error(f'Scheduled refresh failed, keeping previous snapshot: {e}', exc_info=True)
			return False

	async def run(self) -> None:
		self.is_running = True
		logger.info(f'Refresh scheduler started, daily run at {self.refresh_time.isoformat()}')

		while self.is_running:
			try:
				delay = self.seconds_until_next_run()
				logger.info(f'Next exchange rate refresh in {delay / 3600:.2f}h')
				await asyncio.sleep(delay)
				await self.trigger()
			except asyncio.CancelledError:
				logger.info('Refresh scheduler received cancellation signal')
				break

		self.is_running = False
		logger.info('Refresh scheduler stopped')

	def start(self) -> None:
		if self._task is None or self._task.done():
			self._task = asyncio.create_task(self.run(), name='refresh-scheduler')

	async def stop(self) -> None:
		self.is_running = False
		if self._task is not None:
			self._task.cancel()
			with contextlib.suppress(asyncio.CancelledError):
				await self._task
			self._task = None
