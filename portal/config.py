from dotenv import load_dotenv

load_dotenv()

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 🗄 Local device storage
    STORAGE_URL: str = "sqlite:///./local_storage.db"
    STORAGE_QUOTA_CHARS: int = 5 * 1024 * 1024

    # 🔑 Storage keys
    STORAGE_KEY: str = "ipt_demo_v1"
    TOKEN_KEY: str = "auth_token"
    PENDING_VERIFICATION_KEY: str = "unverified_email"

    # 🧭 Routing
    MAX_REDIRECTS: int = 10

    # 🪵 Logging
    LOG_LEVEL: str = "INFO"

    # 🌐 Local frontends allowed to call the API
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
