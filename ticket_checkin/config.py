from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Ticket Check-in Service"
    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Comma separated; "*" allows any origin
    CORS_ORIGINS: str = "*"

    # Scanner client
    SCANNER_API_URL: str = "http://127.0.0.1:8000"
    SCAN_LOG_LIMIT: int = 10
    DUPLICATE_SCAN_WINDOW_SECONDS: float = 2.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
