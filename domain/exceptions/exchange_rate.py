PAST_DATE_WARNING = 'Date must be in the past; current or future dates are not allowed.'


class ExchangeRateException(Exception):
	pass


class InvalidDateError(ExchangeRateException):
	def __init__(self, message: str = PAST_DATE_WARNING):
		super().__init__(message)


class DataUnavailableError(ExchangeRateException):
	pass
