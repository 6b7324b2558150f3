from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FCM_MAX_BATCH_SIZE = 500


class Settings(BaseSettings):
    PROJECT_NAME: str = "Push Notification Gateway"
    API_KEY: str

    FIREBASE_SERVICE_ACCOUNT_B64: str = ""
    FIREBASE_SERVICE_ACCOUNT: str = ""
    FIREBASE_CREDENTIALS_PATH: str = ""

    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "push_notifications"
    RECIPIENT_COLLECTION: str = "users"
    RECIPIENT_TOKEN_FIELD: str = "fcmToken"

    FCM_BATCH_SIZE: int = Field(default=FCM_MAX_BATCH_SIZE, ge=1, le=FCM_MAX_BATCH_SIZE)
    ANDROID_CHANNEL_ID: str = "push_notifications"
    NOTIFICATION_TTL_SECONDS: int = Field(default=86400, ge=0)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("API_KEY")
    @classmethod
    def validate_api_key(cls, value: str) -> str:
        if value.strip().lower() in {"", "change-me", "changeme"}:
            raise ValueError("API_KEY is required. Set a strong shared secret in your .env file.")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper


settings = Settings()
