from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    ACCESS_TOKEN_SECRET: str
    TOKEN_TTL_DAYS: int = 365
    SESSION_COOKIE_NAME: str = "token"

    STRIPE_SECRET_KEY: str
    PAYMENT_CURRENCY: str = "usd"

    AWS_REGION: str = "us-east-1"
    AWS_PROFILE: str | None = None
    DYNAMODB_TABLE_NAME: str = "paw-haven"
    DYNAMODB_ENDPOINT_URL: str | None = None

    ENVIRONMENT: str = "development"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:5174"]
    API_ROOT_PATH: str = ""
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
