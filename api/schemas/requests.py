from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
	model_config = ConfigDict(
		json_schema_extra={'example': {'username': 'admin', 'password': 'admin'}}
	)

	username: str = Field(...)
	password: str = Field(...)
