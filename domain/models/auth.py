from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthToken:
	subject: str
	issued_at: datetime
	expires_at: datetime
	token: str  # signed compact JWT
