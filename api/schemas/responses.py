from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	token: str = Field(..., description='Signed bearer token')
	expires_at: datetime = Field(
		..., serialization_alias='expiresAt', description='When the token stops being accepted'
	)


class ErrorResponse(BaseModel):
	error: str = Field(..., description='Error type')
	message: str | None = Field(None, description='Human-readable error message')


class RefreshResponse(BaseModel):
	refreshed: bool = Field(..., description='False when a refresh was already running')
	version: int | None = Field(None, description='Version of the snapshot now being served')
	published_at: datetime | None = Field(None, serialization_alias='publishedAt')


class HealthResponse(BaseModel):
	status: str = Field(..., description='healthy, degraded or unavailable')
	loaded: bool = Field(..., description='Whether a dataset has been published')
	stale: bool = Field(..., description='Whether the served dataset is awaiting replacement')
	version: int | None = Field(None, description='Version of the served snapshot')
	published_at: datetime | None = Field(None, serialization_alias='publishedAt')
	refreshing: bool = Field(..., description='Whether a rebuild is in flight')
	currencies: int = Field(..., description='Number of supported currencies')
