from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "structflow"

    # Natural-language parameter extraction
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT_SECONDS: int = 60

    # Comma-separated list, "*" allows everything
    CORS_ALLOW_ORIGINS: str = "*"

    class Config:
        env_file = ".env"


settings = Settings()
