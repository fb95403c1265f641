import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, localcontext

from application.services.dataset_builder import DatasetBuilder
from domain.exceptions.exchange_rate import DataUnavailableError, InvalidDateError
from domain.models.exchange_rate import Dataset
from infrastructure.cache.snapshot_store import SnapshotStore, freeze_dataset

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


class ExchangeRateService:
	"""Answers exchange rate queries against the currently published snapshot.

	Rates are units of foreign currency per 1 EUR. Lookups are by exact date,
	there is no nearest-date fallback. Only dates strictly before today are
	accepted, since the source does not reliably publish same-day rates.
	"""

	def __init__(
		self,
		store: SnapshotStore,
		builder: DatasetBuilder,
		currencies: Iterable[str],
		today: Callable[[], date] = date.today,
	):
		self.store = store
		self.builder = builder
		self.currencies = tuple(currencies)
		self._today = today
		self._refresh_lock = asyncio.Lock()

	@property
	def is_refreshing(self) -> bool:
		return self._refresh_lock.locked()

	def _ensure_past(self, day: date) -> None:
		if day >= self._today():
			raise InvalidDateError()

	def list_currencies(self) -> list[str]:
		return list(self.currencies)

	def all_rates(self) -> Dataset:
		return self.store.get().dataset

	def rates_by_date(self, day: date) -> dict[str, Decimal | None]:
		self._ensure_past(day)
		dataset = self.store.get().dataset
		return {
			currency: dataset[currency].get(day) if currency in dataset else None
			for currency in self.currencies
		}

	def rate_for(self, currency: str, day: date) -> Decimal | None:
		self._ensure_past(day)
		table = self.store.get().dataset.get(currency.upper())
		if table is None:
			return None
		return table.get(day)

	def convert_to_eur(self, currency: str, day: date, amount: Decimal) -> Decimal | None:
		if amount < 0:
			return None

		rate = self.rate_for(currency, day)
		if rate is None:
			return None

		# Truncating the quotient keeps every digit that decides the half-up step,
		# so the only rounding is the final one to cents.
		with localcontext() as ctx:
			ctx.prec = max(28, amount.adjusted() - rate.adjusted() + 6)
			ctx.rounding = ROUND_DOWN
			return (amount / rate).quantize(CENTS, rounding=ROUND_HALF_UP)

	async def refresh_now(self) -> bool:
		"""Rebuild the dataset from the source and publish it.

		Returns False without doing anything when a rebuild is already running.
		On failure the previous snapshot keeps being served and
		DataUnavailableError propagates.
		"""
		if self._refresh_lock.locked():
			logger.warning('Refresh already in progress, dropping trigger')
			return False

		async with self._refresh_lock:
			start_time = time.time()
			logger.info('Refreshing exchange rate data...')
			self.store.evict()
			try:
				dataset = await self.builder.build_all()
			except DataUnavailableError as e:
				logger.error(f'Exchange rate refresh failed: {e}')
				raise
			except Exception as e:
				logger.error(f'Exchange rate refresh failed: {e}', exc_info=True)
				raise DataUnavailableError(f'Exchange rate refresh failed: {e}') from e

			frozen = await asyncio.to_thread(freeze_dataset, dataset)
			snapshot = self.store.publish(frozen, copy=False)
			duration = time.time() - start_time
			logger.info(f'Exchange rate refresh completed in {duration:.2f}s (v{snapshot.version})')
			return True

	def status(self) -> dict:
		snapshot = self.store.get() if self.store.has_snapshot else None
		return {
			'loaded': snapshot is not None,
			'stale': self.store.is_stale,
			'version': snapshot.version if snapshot else None,
			'published_at': snapshot.published_at if snapshot else None,
			'refreshing': self.is_refreshing,
			'currencies': len(self.currencies),
		}
