from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROJECT_NAME = "Denuncia API"
DEFAULT_API_PREFIX = "/api"
DEFAULT_DATABASE_URL = "sqlite:///./database.sqlite"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    PROJECT_NAME: str = DEFAULT_PROJECT_NAME
    API_PREFIX: str = DEFAULT_API_PREFIX
    ENV: str = 'development'
    DEBUG: bool = False

    HOST: str = '0.0.0.0'
    PORT: int = 3001

    DATABASE_URL: str = DEFAULT_DATABASE_URL
    DATABASE_TIMEOUT: float = 5.0
    LOG_LEVEL: str = 'INFO'
    FRONTEND_URL: str = 'http://localhost:5173'
    TRUST_PROXY: bool = False

    RATE_LIMIT_MAX: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    DENUNCIA_LIMIT_MAX: int = 5
    DENUNCIA_LIMIT_WINDOW_SECONDS: int = 60 * 60

    @field_validator('FRONTEND_URL', mode='before')
    @classmethod
    def strip_frontend_url(cls, value):  # type: ignore[override]
        return value.strip() if isinstance(value, str) else value

    @property
    def cors_origins(self) -> list[str]:
        if self.FRONTEND_URL == '*':
            return ['*']
        return [item.strip() for item in self.FRONTEND_URL.split(',') if item.strip()]

    @property
    def expose_errors(self) -> bool:
        return self.ENV != 'production'


settings = Settings()
