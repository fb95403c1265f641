from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_auth_service
from api.schemas import ErrorResponse, TokenRequest, TokenResponse
from application.services import AuthService

router = APIRouter(prefix='/auth', tags=['auth'])


@router.post(
	'/token',
	response_model=TokenResponse,
	status_code=status.HTTP_200_OK,
	responses={401: {'model': ErrorResponse, 'description': 'Invalid credentials'}},
	summary='Issue a bearer token',
)
async def issue_token(
	request: TokenRequest,
	service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
	token = service.issue_token(request.username, request.password)
	return TokenResponse(token=token.token, expires_at=token.expires_at)
