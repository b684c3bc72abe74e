"""Configuration management for estate-ledger."""

from dataclasses import dataclass, field
from pathlib import Path

from estate_ledger.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "json", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "estate"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Record store configuration."""

    backend: str = "json"
    json_path: Path = field(default_factory=lambda: Path("data") / "db.json")
    postgres: PostgresConfig = field(default_factory=PostgresConfig)

    def __post_init__(self) -> None:
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
            )


@dataclass
class SmtpConfig:
    """Outbound mail configuration for payment reminders."""

    host: str = "localhost"
    port: int = 587
    username: str | None = None
    password: str | None = None
    from_address: str = "noreply@localhost"
    from_name: str = "Property Management"
    use_tls: bool = True
    timeout: float = 30.0


@dataclass
class LedgerConfig:
    """Main configuration for estate-ledger."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    smtp: SmtpConfig = field(default_factory=SmtpConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "estate"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        storage = StorageConfig(
            backend=os.getenv("ESTATE_STORAGE", "json").lower(),
            json_path=Path(os.getenv("ESTATE_DB_PATH", str(Path("data") / "db.json"))),
            postgres=postgres,
        )

        smtp = SmtpConfig(
            host=os.getenv("SMTP_HOST", "localhost"),
            port=int(os.getenv("SMTP_PORT", "587")),
            username=os.getenv("SMTP_USER") or None,
            password=os.getenv("SMTP_PASSWORD") or None,
            from_address=os.getenv("SMTP_FROM", "noreply@localhost"),
            from_name=os.getenv("SMTP_FROM_NAME", "Property Management"),
            use_tls=os.getenv("SMTP_TLS", "true").lower() == "true",
        )

        return cls(
            storage=storage,
            smtp=smtp,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
