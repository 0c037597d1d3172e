"""
Global configuration settings for BlogQL.

Loads configuration from environment variables and provides
typed access to all system settings.
"""

import os
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000,http://localhost:5173,"
    "http://127.0.0.1:3000,http://127.0.0.1:5173"
)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Global settings for BlogQL."""

    # Database
    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "blogql"
    use_transactions: bool = False

    # Token signing
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"

    # Password hashing
    bcrypt_rounds: int = 12

    # Uploaded post images
    images_dir: str = "images"

    # HTTP
    cors_origins: List[str] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Load settings from environment variables."""
        self.mongodb_uri = os.getenv("MONGODB_URI", self.mongodb_uri)
        self.db_name = os.getenv("BLOGQL_DB_NAME", self.db_name)
        self.use_transactions = _env_bool("BLOGQL_USE_TRANSACTIONS", self.use_transactions)
        self.jwt_secret = os.getenv("JWT_SECRET", self.jwt_secret)
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", self.jwt_algorithm)
        self.images_dir = os.getenv("BLOGQL_IMAGES_DIR", self.images_dir)
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

        if os.getenv("BCRYPT_ROUNDS"):
            self.bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS"))

        if not self.cors_origins:
            origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
            self.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (secrets masked)."""
        return {
            "mongodb_uri": "***" if self.mongodb_uri else "",
            "db_name": self.db_name,
            "use_transactions": self.use_transactions,
            "jwt_secret": "***" if self.jwt_secret else "",
            "jwt_algorithm": self.jwt_algorithm,
            "bcrypt_rounds": self.bcrypt_rounds,
            "images_dir": self.images_dir,
            "cors_origins": list(self.cors_origins),
            "log_level": self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(
    mongodb_uri: str = None,
    db_name: str = None,
    **kwargs
) -> Settings:
    """
    Configure global settings.

    Args:
        mongodb_uri: MongoDB connection URI
        db_name: Database name
        **kwargs: Additional settings

    Returns:
        Configured Settings instance
    """
    settings = get_settings()

    if mongodb_uri:
        settings.mongodb_uri = mongodb_uri
    if db_name:
        settings.db_name = db_name

    for key, value in kwargs.items():
        if hasattr(settings, key):
            setattr(settings, key, value)

    return settings
