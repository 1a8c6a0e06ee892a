"""Configuration management for the Dialogflow fallback webhook."""

from typing import Any, Dict, List

from pydantic import Field, validator
from pydantic_settings import BaseSettings


REQUIRED_FIREBASE_SETTINGS = (
    "FIREBASE_TYPE",
    "FIREBASE_PROJECT_ID",
    "FIREBASE_PRIVATE_KEY",
    "FIREBASE_CLIENT_EMAIL",
    "FIREBASE_DATABASE_URL",
)


class Settings(BaseSettings):
    """Application settings with validation."""

    # Application
    APP_NAME: str = "Dialogflow Fallback Webhook"
    VERSION: str = "0.1.0"
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(default="development", description="Environment")

    # Server
    HOST: str = Field(default="0.0.0.0", description="Host to bind")
    PORT: int = Field(default=3000, description="Port to bind")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Storage
    STORE_BACKEND: str = Field(
        default="firebase",
        description="Fallback record store: 'firebase' or 'memory'"
    )

    # Firebase service account
    FIREBASE_TYPE: str = Field(default="", description="Service account type")
    FIREBASE_PROJECT_ID: str = Field(default="", description="Firebase project ID")
    FIREBASE_PRIVATE_KEY_ID: str = Field(default="", description="Private key ID")
    FIREBASE_PRIVATE_KEY: str = Field(default="", description="PEM private key")
    FIREBASE_CLIENT_EMAIL: str = Field(default="", description="Service account email")
    FIREBASE_CLIENT_ID: str = Field(default="", description="Service account client ID")
    FIREBASE_AUTH_URI: str = Field(default="", description="OAuth auth URI")
    FIREBASE_TOKEN_URI: str = Field(default="", description="OAuth token URI")
    FIREBASE_AUTH_PROVIDER_CERT_URL: str = Field(default="", description="Auth provider cert URL")
    FIREBASE_CLIENT_CERT_URL: str = Field(default="", description="Client cert URL")
    FIREBASE_DATABASE_URL: str = Field(default="", description="Realtime Database URL")
    FIREBASE_USERS_PATH: str = Field(
        default="users",
        description="Database path holding per-user fallback records"
    )

    # Fallback escalation
    FALLBACK_INTENT_NAME: str = Field(
        default="Default Fallback Intent",
        description="Dialogflow intent handled by the cooldown controller"
    )
    FALLBACK_COOLDOWN_MS: int = Field(
        default=18_000_000,
        description="Minimum milliseconds between two escalation messages per user"
    )

    # Business hours
    BUSINESS_TIMEZONE: str = Field(default="Asia/Bangkok", description="Civil time zone")
    BUSINESS_HOURS_START: float = Field(default=9.0, description="Opening hour (inclusive)")
    BUSINESS_HOURS_END: float = Field(default=18.0, description="Closing hour (exclusive)")

    @validator("FIREBASE_PRIVATE_KEY")
    def unescape_private_key(cls, v: str) -> str:
        """Turn literal '\\n' sequences from env files into real newlines."""
        return v.replace("\\n", "\n") if v else v

    @validator("STORE_BACKEND")
    def validate_store_backend(cls, v: str) -> str:
        """Normalize and check the store backend name."""
        backend = v.strip().lower()
        if backend not in ("firebase", "memory"):
            raise ValueError(f"Unsupported store backend: {v}")
        return backend

    def missing_firebase_settings(self) -> List[str]:
        """Names of required Firebase variables that are empty."""
        return [name for name in REQUIRED_FIREBASE_SETTINGS if not getattr(self, name)]

    def firebase_service_account(self) -> Dict[str, Any]:
        """Build the service account mapping expected by firebase_admin."""
        return {
            "type": self.FIREBASE_TYPE,
            "project_id": self.FIREBASE_PROJECT_ID,
            "private_key_id": self.FIREBASE_PRIVATE_KEY_ID,
            "private_key": self.FIREBASE_PRIVATE_KEY,
            "client_email": self.FIREBASE_CLIENT_EMAIL,
            "client_id": self.FIREBASE_CLIENT_ID,
            "auth_uri": self.FIREBASE_AUTH_URI,
            "token_uri": self.FIREBASE_TOKEN_URI,
            "auth_provider_x509_cert_url": self.FIREBASE_AUTH_PROVIDER_CERT_URL,
            "client_x509_cert_url": self.FIREBASE_CLIENT_CERT_URL,
        }

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
