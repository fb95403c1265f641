import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from domain.exceptions.auth import InvalidCredentialsError, InvalidTokenError
from domain.models.auth import AuthToken

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
	return datetime.now(UTC)


class AuthService:
	"""Issues and verifies stateless bearer tokens for a single configured user.

	Tokens are HMAC-signed JWTs carrying ``sub``, ``iat`` and ``exp``. Nothing
	is stored server side; a token is valid as long as its signature checks
	out and it has not expired.
	"""

	def __init__(
		self,
		username: str,
		password: str,
		secret: str,
		algorithm: str = 'HS512',
		expiry: timedelta = timedelta(hours=24),
		clock: Callable[[], datetime] = _utcnow,
	):
		if not secret:
			raise ValueError('JWT secret must not be empty')
		self._username = username
		self._password = password
		self._secret = secret
		self.algorithm = algorithm
		self.expiry = expiry
		self._clock = clock

	def _credentials_match(self, username: str, password: str) -> bool:
		user_ok = secrets.compare_digest(username.encode(), self._username.encode())
		password_ok = secrets.compare_digest(password.encode(), self._password.encode())
		return user_ok and password_ok

	def issue_token(self, username: str, password: str) -> AuthToken:
		if not self._credentials_match(username, password):
			logger.warning(f'Rejected token request for user {username!r}')
			raise InvalidCredentialsError('Invalid credentials')

		# JWT timestamps have second resolution
		issued_at = self._clock().replace(microsecond=0)
		expires_at = issued_at + self.expiry
		claims = {
			'sub': username,
			'iat': int(issued_at.timestamp()),
			'exp': int(expires_at.timestamp()),
		}
		token = jwt.encode(claims, self._secret, algorithm=self.algorithm)

		logger.info(f'Issued token for {username}, expires at {expires_at.isoformat()}')
		return AuthToken(subject=username, issued_at=issued_at, expires_at=expires_at, token=token)

	def validate(self, token: str | None) -> str:
		"""Return the token subject, or raise InvalidTokenError."""
		if not token:
			raise InvalidTokenError('Missing token')

		try:
			# expiry is checked below against the injected clock
			claims = jwt.decode(
				token,
				self._secret,
				algorithms=[self.algorithm],
				options={'verify_exp': False, 'verify_iat': False},
			)
		except JWTError as e:
			raise InvalidTokenError(f'Invalid token: {e}') from e

		subject = claims.get('sub')
		expires = claims.get('exp')
		if not isinstance(subject, str) or not subject:
			raise InvalidTokenError('Token has no subject')
		if not isinstance(expires, int | float):
			raise InvalidTokenError('Token has no expiry')
		if self._clock().timestamp() >= expires:
			raise InvalidTokenError('Token has expired')

		return subject
