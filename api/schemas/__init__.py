from .requests import TokenRequest
from .responses import ErrorResponse, HealthResponse, RefreshResponse, TokenResponse

__all__ = [
	'ErrorResponse',
	'HealthResponse',
	'RefreshResponse',
	'TokenRequest',
	'TokenResponse',
]
