from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite+aiosqlite:///./devtrack.db"

    # Security
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    # 0 disables expiry
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    PORT: int = 5000
    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

settings = Settings()
