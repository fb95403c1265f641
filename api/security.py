import logging
from collections.abc import Iterable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from api.dependencies import get_auth_service
from domain.exceptions.auth import InvalidTokenError

logger = logging.getLogger(__name__)

UNAUTHORIZED_BODY = {'error': 'Unauthorized', 'message': 'Invalid or missing token'}


def public_paths_for(api_prefix: str) -> frozenset[str]:
	"""Paths reachable without a token: token issuance, docs and health."""
	return frozenset(
		{
			f'{api_prefix}/auth/token',
			'/health',
			'/docs',
			'/docs/oauth2-redirect',
			'/redoc',
			'/openapi.json',
		}
	)


def extract_bearer_token(header: str | None) -> str | None:
	if not header:
		return None
	scheme, _, token = header.partition(' ')
	if scheme.lower() != 'bearer' or not token.strip():
		return None
	return token.strip()


class AuthGateMiddleware(BaseHTTPMiddleware):
	"""
	Rejects every request outside the public path set unless it carries a
	valid bearer token. The token subject is attached to ``request.state.subject``.
	"""

	def __init__(self, app, public_paths: Iterable[str]):
		super().__init__(app)
		self.public_paths = frozenset(p.rstrip('/') or '/' for p in public_paths)

	def is_public(self, path: str) -> bool:
		return (path.rstrip('/') or '/') in self.public_paths

	async def dispatch(self, request: Request, call_next):
		if self.is_public(request.url.path):
			return await call_next(request)

		token = extract_bearer_token(request.headers.get('Authorization'))
		try:
			subject = get_auth_service().validate(token)
		except InvalidTokenError as e:
			logger.debug(f'Rejected {request.method} {request.url.path}: {e}')
			return JSONResponse(
				status_code=status.HTTP_401_UNAUTHORIZED,
				content=UNAUTHORIZED_BODY,
				headers={'WWW-Authenticate': 'Bearer'},
			)

		request.state.subject = subject
		return await call_next(request)


def get_current_subject(request: Request) -> str:
	return request.state.subject
