import logging
from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse

from api.dependencies import get_exchange_rate_service
from api.schemas import ErrorResponse, RefreshResponse
from api.security import get_current_subject
from application.services import ExchangeRateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/exchange-rates', tags=['exchange-rates'])

CurrencyPath = Annotated[str, Path(min_length=3, max_length=3, description='Currency code like USD, INR')]
DatePath = Annotated[date, Path(description='Date in ISO format (yyyy-MM-dd)')]

# Amounts above this get a 422 instead of an arbitrarily long division
MAX_AMOUNT = Decimal('1e100')


def _not_found(message: str) -> JSONResponse:
	return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={'error': message})


@router.get(
	'/currencies',
	response_model=list[str],
	status_code=status.HTTP_200_OK,
	summary='Get supported currency codes',
)
async def get_currencies(
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> list[str]:
	return service.list_currencies()


@router.get(
	'',
	response_model=dict[str, dict[str, float]],
	status_code=status.HTTP_200_OK,
	summary='Get all exchange rates',
	description='Rates for every currency and every available date, as units per 1 EUR.',
)
async def get_all_rates(
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> dict[str, dict[str, float]]:
	dataset = service.all_rates()
	return {
		currency: {day.isoformat(): float(rate) for day, rate in table.items()}
		for currency, table in dataset.items()
	}


@router.get(
	'/date/{day}',
	response_model=dict[str, float | None],
	status_code=status.HTTP_200_OK,
	responses={400: {'model': ErrorResponse, 'description': 'Date is not in the past'}},
	summary='Get exchange rates by date',
)
async def get_rates_by_date(
	day: DatePath,
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> dict[str, float | None]:
	rates = service.rates_by_date(day)
	return {currency: float(rate) if rate is not None else None for currency, rate in rates.items()}


@router.get(
	'/{currency}/date/{day}',
	response_model=float,
	status_code=status.HTTP_200_OK,
	responses={
		400: {'model': ErrorResponse, 'description': 'Date is not in the past'},
		404: {'model': ErrorResponse, 'description': 'Exchange rate unavailable'},
	},
	summary='Get exchange rate for a specific currency and date',
)
async def get_rate_for_currency_and_date(
	currency: CurrencyPath,
	day: DatePath,
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> float | JSONResponse:
	rate = service.rate_for(currency.upper(), day)
	if rate is None:
		return _not_found('Exchange rate unavailable')
	return float(rate)


@router.get(
	'/{currency}/convert-to-eur/{day}/{amount}',
	response_model=float,
	status_code=status.HTTP_200_OK,
	responses={
		400: {'model': ErrorResponse, 'description': 'Date is not in the past'},
		404: {'model': ErrorResponse, 'description': 'Conversion unavailable'},
	},
	summary='Convert an amount to EUR',
	description='Converts the amount using the rate published for the given date, rounded half-up to cents.',
)
async def convert_to_eur(
	currency: CurrencyPath,
	day: DatePath,
	amount: Annotated[
		Decimal, Path(le=MAX_AMOUNT, description='Amount in source currency to convert')
	],
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> float | JSONResponse:
	converted = service.convert_to_eur(currency.upper(), day, amount)
	if converted is None:
		return _not_found('Conversion unavailable')
	return float(converted)


@router.post(
	'/refresh',
	response_model=RefreshResponse,
	status_code=status.HTTP_200_OK,
	responses={503: {'model': ErrorResponse, 'description': 'Source unavailable'}},
	summary='Rebuild the exchange rate dataset now',
)
async def refresh_exchange_rates(
	subject: Annotated[str, Depends(get_current_subject)],
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> RefreshResponse:
	logger.info(f'On-demand refresh requested by {subject}')
	refreshed = await service.refresh_now()
	snapshot = service.store.get()
	return RefreshResponse(
		refreshed=refreshed, version=snapshot.version, published_at=snapshot.published_at
	)
