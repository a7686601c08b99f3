"""Configuration management for rental-engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

VERIFICATION_MODES = ("offline", "http")
STORE_BACKENDS = ("memory", "json", "postgres")
EVENT_SINKS = ("none", "console", "kafka")


@dataclass
class VerificationConfig:
    """Government verification service configuration."""

    mode: str = "offline"
    base_url: str = "http://localhost:8090/api"
    api_key: str | None = None
    timeout_seconds: float = 10.0


@dataclass
class KafkaConfig:
    """Kafka producer configuration for lifecycle events."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic: str = "rentals.lifecycle"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "rentals"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StoreConfig:
    """Rental request store selection."""

    backend: str = "memory"
    json_path: Path = field(default_factory=lambda: Path("data/rental_requests.json"))


@dataclass
class EngineConfig:
    """Main configuration for rental-engine."""

    verification: VerificationConfig = field(default_factory=VerificationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    events_sink: str = "none"
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        verification = VerificationConfig(
            mode=os.getenv("VERIFICATION_MODE", "offline"),
            base_url=os.getenv("VERIFICATION_BASE_URL", "http://localhost:8090/api"),
            api_key=os.getenv("VERIFICATION_API_KEY") or None,
            timeout_seconds=float(os.getenv("VERIFICATION_TIMEOUT", "10")),
        )

        store = StoreConfig(
            backend=os.getenv("STORE_BACKEND", "memory"),
            json_path=Path(os.getenv("STORE_JSON_PATH", "data/rental_requests.json")),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "rentals"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic=os.getenv("KAFKA_TOPIC", "rentals.lifecycle"),
        )

        return cls(
            verification=verification,
            store=store,
            postgres=postgres,
            kafka=kafka,
            events_sink=os.getenv("EVENTS_SINK", "none"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
