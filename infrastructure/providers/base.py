from abc import ABC, abstractmethod

RawRow = tuple[str, str]


class ExchangeRateDataSource(ABC):
	"""Source of raw (date, rate) rows for one currency against EUR."""

	@property
	@abstractmethod
	def name(self) -> str: ...

	@abstractmethod
	async def fetch_rows(self, currency: str) -> list[RawRow]:
		"""Return the raw rows for ``currency``.

		Raises DataUnavailableError when the source cannot be reached or read.
		Rows are not validated here.
		"""
		...

	async def close(self) -> None:
		return None
