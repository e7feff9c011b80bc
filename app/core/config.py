import json

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    FRONTEND_URL: str = "http://localhost:3000"

    BACKEND_CORS_ORIGINS: str = '["http://localhost:3000","http://localhost:5173"]'

    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Coursehub Learning API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Mux public delivery hosts
    MUX_STREAM_BASE_URL: str = "https://stream.mux.com"
    MUX_IMAGE_BASE_URL: str = "https://image.mux.com"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            try:
                parsed: list[str] = json.loads(self.BACKEND_CORS_ORIGINS)
                return parsed
            except json.JSONDecodeError:
                return [self.FRONTEND_URL]
        return self.BACKEND_CORS_ORIGINS


settings = Settings()
