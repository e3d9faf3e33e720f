from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	LOG_LEVEL: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = 'WARNING'
	LOG_FILE: str = ''

	# Provider HTTP client
	HTTP_TIMEOUT: float = 10.0
	STRICT_PROVIDER_ERRORS: bool = False

	model_config = SettingsConfigDict(
		env_prefix='FXRQ_', env_file='.env', case_sensitive=False, extra='ignore'
	)

	@field_validator('LOG_LEVEL', mode='before')
	@classmethod
	def uppercase_level(cls, v):
		return v.upper() if isinstance(v, str) else v


@lru_cache
def get_settings() -> Settings:
	return Settings()
