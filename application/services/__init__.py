from .auth_service import AuthService
from .dataset_builder import DatasetBuilder
from .exchange_rate_service import ExchangeRateService

__all__ = ['AuthService', 'DatasetBuilder', 'ExchangeRateService']
