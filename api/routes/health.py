from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_exchange_rate_service
from api.schemas import HealthResponse
from application.services import ExchangeRateService

router = APIRouter(tags=['health'])


@router.get(
	'/health',
	response_model=HealthResponse,
	status_code=status.HTTP_200_OK,
	responses={503: {'model': HealthResponse, 'description': 'No dataset loaded'}},
	summary='Exchange rate cache health',
)
async def health_check(
	service: Annotated[ExchangeRateService, Depends(get_exchange_rate_service)],
) -> HealthResponse | JSONResponse:
	"""
	Report whether a dataset is being served and how fresh it is.

	- healthy: a snapshot is published and not awaiting replacement
	- degraded: the served snapshot is stale (refresh running or last refresh failed)
	- unavailable: nothing has been published yet
	"""
	info = service.status()
	if not info['loaded']:
		health_status = 'unavailable'
	elif info['stale']:
		health_status = 'degraded'
	else:
		health_status = 'healthy'

	response = HealthResponse(status=health_status, **info)
	if health_status == 'unavailable':
		return JSONResponse(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			content=response.model_dump(mode='json', by_alias=True),
		)
	return response
