import asyncio
import logging
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from domain.exceptions.exchange_rate import DataUnavailableError
from domain.models.exchange_rate import CurrencyTable, Dataset, RateEntry
from infrastructure.providers.base import ExchangeRateDataSource, RawRow

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'


def parse_date(value: str) -> date | None:
	try:
		return datetime.strptime(value.strip(), DATE_FORMAT).date()
	except (ValueError, AttributeError):
		return None


def parse_rate(value: str) -> Decimal | None:
	if not value:
		return None
	try:
		rate = Decimal(value.strip())
	except (InvalidOperation, AttributeError):
		return None
	if not rate.is_finite() or rate <= 0:
		return None
	return rate


def parse_row(row: RawRow) -> RateEntry | None:
	"""Turn a raw ``(date, rate)`` pair into a RateEntry, or None if either field is bad."""
	if len(row) < 2:
		return None
	day = parse_date(row[0])
	rate = parse_rate(row[1])
	if day is None or rate is None:
		return None
	return RateEntry(date=day, rate=rate)


class DatasetBuilder:
	def __init__(
		self,
		source: ExchangeRateDataSource,
		currencies: Iterable[str],
		max_concurrency: int = 5,
	):
		self.source = source
		self.currencies = tuple(currencies)
		self.max_concurrency = max(1, max_concurrency)

	async def build(self, currency: str) -> CurrencyTable:
		try:
			rows = await self.source.fetch_rows(currency)
		except DataUnavailableError:
			raise
		except Exception as e:
			raise DataUnavailableError(f'Failed to load data for {currency}: {e}') from e

		# CPU bound, kept off the event loop
		return await asyncio.to_thread(self._parse_rows, currency, rows)

	def _parse_rows(self, currency: str, rows: list[RawRow]) -> CurrencyTable:
		table = {}
		skipped = 0
		for row in rows:
			entry = parse_row(row)
			if entry is None:
				skipped += 1
				continue
			table[entry.date] = entry.rate

		logger.debug(f'{currency}: {len(table)} rates loaded, {skipped} rows skipped')
		return MappingProxyType(table)

	async def build_all(self) -> Dataset:
		"""Build every configured currency; any single failure fails the whole build."""
		semaphore = asyncio.Semaphore(self.max_concurrency)

		async def build_one(currency: str) -> CurrencyTable:
			async with semaphore:
				return await self.build(currency)

		logger.info(f'Building dataset for {len(self.currencies)} currencies from {self.source.name}')
		tables = await asyncio.gather(*(build_one(c) for c in self.currencies))

		return MappingProxyType(dict(zip(self.currencies, tables, strict=True)))
