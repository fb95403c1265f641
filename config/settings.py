import json
from datetime import time
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

CURRENCIES_FILE = Path(__file__).parent / 'currencies.json'


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Exchange Rate API'
	DEBUG: bool = False
	API_PREFIX: str = '/api'
	HOST: str = '0.0.0.0'
	PORT: int = 8000

	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	# Security
	JWT_SECRET: str = 'change-me-to-a-long-random-secret'
	JWT_ALGORITHM: str = 'HS512'
	TOKEN_EXPIRY_HOURS: int = 24
	AUTH_USERNAME: str = 'admin'
	AUTH_PASSWORD: str = 'admin'

	# Exchange rate data
	# JSON list or comma separated, e.g. USD,INR
	SUPPORTED_CURRENCIES: Annotated[list[str], NoDecode] = []
	EXCHANGE_RATE_DATA_URL: str = (
		'https://api.statistiken.bundesbank.de/rest/download/BBEX3/'
		'D.{currency}.EUR.BB.AC.000?format=csv&lang=en'
	)
	REQUEST_TIMEOUT: int = 30
	FETCH_RETRY_ATTEMPTS: int = 3
	FETCH_RETRY_BACKOFF: float = 1.0
	MAX_CONCURRENT_FETCHES: int = 5

	# Daily refresh, local wall-clock time
	REFRESH_TIME: time = time(0, 5)
	REFRESH_ENABLED: bool = True

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@field_validator('SUPPORTED_CURRENCIES', mode='before')
	@classmethod
	def split_currencies(cls, v):
		if isinstance(v, str):
			v = v.strip()
			if v.startswith('['):
				return json.loads(v)
			return v.split(',')
		return v

	@field_validator('SUPPORTED_CURRENCIES')
	@classmethod
	def uppercase_currencies(cls, v: list[str]) -> list[str]:
		return [c.strip().upper() for c in v if c.strip()]

	@field_validator('API_PREFIX')
	@classmethod
	def normalize_prefix(cls, v: str) -> str:
		v = v.strip().rstrip('/')
		if v and not v.startswith('/'):
			v = f'/{v}'
		return v


def load_supported_currencies(settings: Settings) -> tuple[str, ...]:
	"""Resolve the fixed, ordered list of supported currency codes.

	SUPPORTED_CURRENCIES wins when set; otherwise the bundled currencies.json
	is used. Order is preserved and duplicates are dropped.
	"""
	codes = settings.SUPPORTED_CURRENCIES
	if not codes:
		with CURRENCIES_FILE.open(encoding='utf-8') as f:
			codes = [str(c).strip().upper() for c in json.load(f)]

	currencies = tuple(dict.fromkeys(codes))
	if not currencies:
		raise ValueError('No supported currencies configured')

	for code in currencies:
		if len(code) != 3 or not code.isalpha():
			raise ValueError(f'Invalid currency code: {code} (must be 3 letters)')

	return currencies


@lru_cache
def get_settings() -> Settings:
	return Settings()
