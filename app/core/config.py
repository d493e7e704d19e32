# app/core/config.py

from pydantic import Field, AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # MongoDB settings
    MONGODB_URI: str = Field(...)
    MONGODB_USERNAME: str = Field(...)
    MONGODB_PASSWORD: str = Field(...)
    MONGODB_DB: str = Field(default="clinic")
    CHAT_HISTORY_COLLECTION: str = Field(default="n8n_chat_histories")
    PATIENTS_COLLECTION: str = Field(default="dados_cliente")

    # Workflow webhook settings
    CHAT_WEBHOOK_URL: AnyHttpUrl = Field(...)
    CHAT_WEBHOOK_TIMEOUT: float = Field(default=10.0, gt=0)

    LOG_LEVEL: str = Field(default="INFO")

settings = Settings()
