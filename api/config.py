"""
Configuration management for the Chameleon Sum API.

Defaults can be overridden from the environment (``CHAMELEON_*``) or a
``.env`` file at the project root, and per instance with keyword arguments.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

BASE_DIR: Path = Path(__file__).parent.parent
load_dotenv(BASE_DIR / ".env")

ENV_PREFIX = "CHAMELEON_"


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_optional(name: str) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name) or None


class Settings:
    """API server configuration."""

    # Server
    API_TITLE: str = "Chameleon Sum API"
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    HOST: str = _env("HOST", "0.0.0.0")
    PORT: int = int(_env("PORT", "8080"))

    # Timeouts (seconds)
    READ_TIMEOUT: float = 5.0
    WRITE_TIMEOUT: float = 10.0
    IDLE_TIMEOUT: int = 120

    # TLS, see https://blog.cloudflare.com/exposing-go-on-the-internet/
    CERT_FILE: str = _env("CERT_FILE", "./certs/app.crt")
    KEY_FILE: str = _env("KEY_FILE", "./certs/app.key")
    TLS_CURVES: List[str] = ["prime256v1", "X25519"]
    TLS_CIPHERS: List[str] = [
        "ECDHE-ECDSA-AES256-GCM-SHA384",
        "ECDHE-RSA-AES256-GCM-SHA384",
        "ECDHE-ECDSA-CHACHA20-POLY1305",
        "ECDHE-RSA-CHACHA20-POLY1305",
        "ECDHE-ECDSA-AES128-GCM-SHA256",
        "ECDHE-RSA-AES128-GCM-SHA256",
    ]

    # Database
    DB_PATH: str = _env("DB_PATH", "./servr.db")
    DB_TIMEOUT: int = 30  # SQLite connection timeout in seconds

    # Logging
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = _env_optional("LOG_FILE")

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key) or key.startswith("_"):
                raise TypeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def tls_cipher_string(self) -> str:
        """Cipher list in OpenSSL syntax."""
        return ":".join(self.TLS_CIPHERS)


settings = Settings()
