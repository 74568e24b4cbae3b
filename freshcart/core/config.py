from functools import lru_cache
from typing import Literal, Optional
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
CatalogBackend = Literal["kv", "mongo"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "FreshCartRecommendations"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Key-value store (optional: in-memory store when unset or unreachable)
    REDIS_URL: Optional[str] = None
    KV_PREFIX: str = "freshcart"

    # Catalog source
    CATALOG_BACKEND: CatalogBackend = "kv"
    MONGO_URI: Optional[str] = None
    MONGO_DB: str = "freshcart"

    # Interaction retention per action kind (None = unbounded)
    VIEWED_RETENTION: Optional[int] = 50
    CART_RETENTION: Optional[int] = None
    PURCHASED_RETENTION: Optional[int] = None

    # Generative-language backend (no key = fallback only)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None     # any OpenAI-compatible endpoint
    OPENAI_RECO_MODEL: str = "gpt-4o-mini"
    OPENAI_CHAT_MODEL: str = "gpt-4o-mini"
    openai_timeout_s: int = 30                # seconds

    # Minimum spacing between two AI calls, process-wide
    AI_MIN_INTERVAL_S: float = 3.0

    # CORS (CSV)
    ALLOWED_ORIGINS: str = ""

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
