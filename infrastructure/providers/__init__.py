from .base import ExchangeRateDataSource, RawRow
from .bundesbank import BundesbankDataSource

__all__ = ['ExchangeRateDataSource', 'RawRow', 'BundesbankDataSource']
