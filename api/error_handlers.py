import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from domain.exceptions.auth import InvalidCredentialsError, InvalidTokenError
from domain.exceptions.exchange_rate import DataUnavailableError, InvalidDateError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidDateError)
	async def invalid_date_handler(request: Request, exc: InvalidDateError):
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content={'error': 'Invalid date', 'message': str(exc)},
		)

	@app.exception_handler(DataUnavailableError)
	async def data_unavailable_handler(request: Request, exc: DataUnavailableError):
		logger.error(f'Exchange rate data unavailable: {exc}')
		return JSONResponse(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			content={'error': 'Service unavailable', 'message': 'Exchange rate data unavailable'},
		)

	@app.exception_handler(InvalidCredentialsError)
	async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
		return JSONResponse(
			status_code=status.HTTP_401_UNAUTHORIZED, content={'error': 'Invalid credentials'}
		)

	@app.exception_handler(InvalidTokenError)
	async def invalid_token_handler(request: Request, exc: InvalidTokenError):
		return JSONResponse(
			status_code=status.HTTP_401_UNAUTHORIZED,
			content={'error': 'Unauthorized', 'message': 'Invalid or missing token'},
			headers={'WWW-Authenticate': 'Bearer'},
		)
