"""Application configuration"""

from dataclasses import dataclass, field
from datetime import timedelta
from os import getenv
from pathlib import Path


@dataclass
class Config:
    # HMAC secret for session tokens
    secret_key: str | None = field(default=getenv("BANKCARDS_SECRET_KEY", ""))
    # AES key for card numbers, must be exactly 16 bytes
    encryption_key: str | None = field(default=getenv("BANKCARDS_ENCRYPTION_KEY", ""))

    access_token_ttl: int = field(
        default=int(
            getenv(
                "BANKCARDS_ACCESS_TOKEN_TTL",
                int(timedelta(minutes=15).total_seconds()),
            )
        )
    )
    refresh_token_ttl: int = field(
        default=int(
            getenv(
                "BANKCARDS_REFRESH_TOKEN_TTL",
                int(timedelta(days=7).total_seconds()),
            )
        )
    )

    # card number cipher parameters
    nonce_length: int = 12
    tag_length: int = 16
    charset: str = "utf-8"
    masking_pattern: str = "**** **** **** {}"

    identity_cache_size: int = 1024
    identity_cache_ttl: int = int(timedelta(minutes=5).total_seconds())

    app_name: str = "bankcards"
    app_version: str = "0.1.0"

    # Optional database URL for Postgres or other databases
    database_url_env: str | None = field(
        default=getenv("BANKCARDS_DATABASE_URL", None)
    )

    @property
    def database_path(self) -> Path:
        return Path("./data/") / Path(f"{self.app_name}.db")

    @property
    def database_url(self) -> str:
        if self.database_url_env:
            return self.database_url_env
        return f"sqlite:///{self.database_path}"


def get_config():
    return Config()
