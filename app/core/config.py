from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # PostgreSQL Configuration
    postgres_user: str = Field(default="admin", env="POSTGRES_USER")
    postgres_password: str = Field(default="admin", env="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="interactions", env="POSTGRES_DB")
    postgres_host: str = Field(default="db", env="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, env="POSTGRES_PORT")

    # Application Configuration
    app_env: str = Field(default="dev", env="APP_ENV")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    api_port: int = Field(default=8000, env="API_PORT")
    jwt_secret: str = Field(
        default="change-me-in-production-use-a-secure-random-string",
        env="JWT_SECRET"
    )
    access_token_expires: int = Field(default=900, env="ACCESS_TOKEN_EXPIRES")  # 15 minutes

    # Redis (per-user preference lock)
    redis_url: str = Field(default="redis://redis:6379/0", env="REDIS_URL")
    redis_pool_size: int = Field(default=20, env="REDIS_POOL_SIZE")
    preference_lock_enabled: bool = Field(default=True, env="PREFERENCE_LOCK_ENABLED")
    preference_lock_ttl_ms: int = Field(default=5000, env="PREFERENCE_LOCK_TTL_MS")
    preference_lock_wait_seconds: float = Field(default=2.0, env="PREFERENCE_LOCK_WAIT_SECONDS")

    # Preference profile
    last_seen_limit: int = Field(default=50, env="LAST_SEEN_LIMIT")

    # Attention validation thresholds
    attention_required_score: float = Field(default=85, env="ATTENTION_REQUIRED_SCORE")
    attention_required_watch_percentage: float = Field(default=95, env="ATTENTION_REQUIRED_WATCH_PERCENTAGE")
    attention_min_frames: int = Field(default=10, env="ATTENTION_MIN_FRAMES")

    @property
    def database_url(self) -> str:
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # CORS - the web client calls the API directly from any origin
    allowed_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
