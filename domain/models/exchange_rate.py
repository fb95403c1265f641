from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

CurrencyCode = str
CurrencyTable = Mapping[date, Decimal]
Dataset = Mapping[CurrencyCode, CurrencyTable]


@dataclass(frozen=True)
class RateEntry:
	date: date
	rate: Decimal  # units of foreign currency per 1 EUR


@dataclass(frozen=True)
class Snapshot:
	dataset: Dataset
	published_at: datetime
	version: int
