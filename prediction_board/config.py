import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


# ------------------ Settings ------------------
class Settings(BaseSettings):
    # ================= App =================
    APP_TITLE: str = "Prediction Board"
    APP_HOST: str = "0.0.0.0"
    PORT: int = 3000
    APP_ENV: str = "production"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # ================= Logging =================
    LOG_LEVEL: str = "INFO"

    # ================= Firebase service account =================
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_PRIVATE_KEY_ID: str = ""
    FIREBASE_PRIVATE_KEY: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_CLIENT_ID: str = ""
    FIREBASE_AUTH_URI: str = "https://accounts.google.com/o/oauth2/auth"
    FIREBASE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    FIREBASE_AUTH_PROVIDER_X509_CERT_URL: str = (
        "https://www.googleapis.com/oauth2/v1/certs"
    )
    FIREBASE_CLIENT_X509_CERT_URL: str = ""

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"

    @property
    def FIREBASE_SERVICE_ACCOUNT_INFO(self) -> dict:
        # Private keys pasted into env files keep their newlines escaped
        return {
            "type": "service_account",
            "project_id": self.FIREBASE_PROJECT_ID,
            "private_key_id": self.FIREBASE_PRIVATE_KEY_ID,
            "private_key": self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
            "client_email": self.FIREBASE_CLIENT_EMAIL,
            "client_id": self.FIREBASE_CLIENT_ID,
            "auth_uri": self.FIREBASE_AUTH_URI,
            "token_uri": self.FIREBASE_TOKEN_URI,
            "auth_provider_x509_cert_url": self.FIREBASE_AUTH_PROVIDER_X509_CERT_URL,
            "client_x509_cert_url": self.FIREBASE_CLIENT_X509_CERT_URL,
        }

    model_config = SettingsConfigDict(
        env_file=".env.public", env_file_encoding="utf-8", extra="ignore"
    )


# ------------------ Helper ------------------
def get_settings(env_file: str = ".env.public") -> Settings:
    env_path = Path(env_file)
    if env_path.exists():
        log.info(f"Loading configuration from {env_path}")
        return Settings(_env_file=env_path)
    log.info(f"Env file not found at {env_path}, using environment only")
    return Settings(_env_file=None)
