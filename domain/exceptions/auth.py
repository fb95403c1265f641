class AuthException(Exception):
	pass


class InvalidCredentialsError(AuthException):
	pass


class InvalidTokenError(AuthException):
	pass
