import asyncio
import csv
import io
import logging

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from domain.exceptions.exchange_rate import DataUnavailableError
from infrastructure.providers.base import ExchangeRateDataSource, RawRow

logger = logging.getLogger(__name__)


def parse_csv(text: str) -> list[RawRow]:
	"""Split the download into stripped ``(first, second)`` column pairs."""
	return [
		(line[0].strip(), line[1].strip())
		for line in csv.reader(io.StringIO(text))
		if len(line) >= 2
	]


class BundesbankDataSource(ExchangeRateDataSource):
	"""Daily EUR reference rates from the Bundesbank time-series CSV download.

	The CSV starts with a few metadata lines (series key, unit, last update, ...)
	followed by ``yyyy-MM-dd,rate,flags`` lines. Everything with two or more
	columns is returned; telling data rows from metadata is left to the builder.
	"""

	def __init__(
		self,
		url_template: str,
		client: httpx.AsyncClient | None = None,
		timeout: int = 30,
		retry_attempts: int = 3,
		retry_backoff: float = 1.0,
	):
		self.url_template = url_template
		self.retry_attempts = max(1, retry_attempts)
		self.retry_backoff = retry_backoff
		self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

	@property
	def name(self) -> str:
		return 'bundesbank'

	def build_url(self, currency: str) -> str:
		return self.url_template.format(currency=currency)

	async def _download(self, url: str) -> str:
		async for attempt in AsyncRetrying(
			stop=stop_after_attempt(self.retry_attempts),
			wait=wait_exponential(multiplier=self.retry_backoff, max=10),
			retry=retry_if_exception_type(httpx.TransportError),
			reraise=True,
		):
			with attempt:
				response = await self._client.get(url)
				response.raise_for_status()
				return response.text
		raise DataUnavailableError(f'Bundesbank download gave up: {url}')

	async def fetch_rows(self, currency: str) -> list[RawRow]:
		url = self.build_url(currency)

		try:
			text = await self._download(url)
		except httpx.HTTPStatusError as e:
			raise DataUnavailableError(
				f'Bundesbank HTTP error {e.response.status_code} for {currency}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise DataUnavailableError(
				f'Bundesbank request failed for {currency}: {e.__class__.__name__}'
			) from e

		try:
			rows = await asyncio.to_thread(parse_csv, text)
		except csv.Error as e:
			raise DataUnavailableError(f'Bundesbank CSV parsing error for {currency}: {e}') from e

		logger.debug(f'Fetched {len(rows)} raw rows for {currency} from {self.name}')
		return rows

	async def close(self) -> None:
		await self._client.aclose()
