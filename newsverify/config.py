from pydantic_settings import BaseSettings
from typing import List, Optional
import os

class Settings(BaseSettings):
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS: Optional[str] = None  # service account key path
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT: float = 30.0

    FETCH_TIMEOUT: float = 10.0
    HISTORY_BACKEND: str = "memory"  # "memory" | "firestore"
    LOG_LEVEL: str = "INFO"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def firebase_enabled(self) -> bool:
        return bool(self.FIREBASE_PROJECT_ID or self.FIREBASE_CREDENTIALS)

settings = Settings(_env_file=os.getenv("ENV_FILE", ".env"), _env_file_encoding="utf-8")
