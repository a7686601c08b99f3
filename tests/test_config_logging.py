"""Tests for config and logging."""

import json
import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

from rental_engine import __version__
from rental_engine.config import (
    EngineConfig,
    KafkaConfig,
    PostgresConfig,
    StoreConfig,
    VerificationConfig,
)
from rental_engine.logging import JsonFormatter, setup_logging


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.topic == "rentals.lifecycle"

    def test_to_dict(self) -> None:
        """Test conversion to confluent-kafka config dict."""
        config = KafkaConfig(bootstrap_servers="kafka:9092", acks="1", topic="other")

        result = config.to_dict()

        assert result == {
            "bootstrap.servers": "kafka:9092",
            "acks": "1",
            "batch.size": 16384,
            "linger.ms": 5,
            "compression.type": "snappy",
            "retries": 3,
        }


class TestPostgresConfig:
    """Tests for PostgresConfig."""

    def test_connection_string(self) -> None:
        config = PostgresConfig(host="db", port=5433, database="rent", user="u", password="p")

        assert config.connection_string == "postgresql://u:p@db:5433/rent"


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_default_values(self) -> None:
        config = EngineConfig()

        assert config.verification == VerificationConfig()
        assert config.verification.mode == "offline"
        assert config.store.backend == "memory"
        assert config.store.json_path == Path("data/rental_requests.json")
        assert config.events_sink == "none"
        assert config.log_level == "INFO"

    def test_from_env_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = EngineConfig.from_env()

        assert config.verification.base_url == "http://localhost:8090/api"
        assert config.verification.api_key is None
        assert config.verification.timeout_seconds == 10.0
        assert config.store == StoreConfig()
        assert config.postgres.database == "rentals"
        assert config.log_format == "standard"

    def test_from_env_custom(self) -> None:
        env = {
            "VERIFICATION_MODE": "http",
            "VERIFICATION_BASE_URL": "https://gov.test/api",
            "VERIFICATION_API_KEY": "secret",
            "VERIFICATION_TIMEOUT": "2.5",
            "STORE_BACKEND": "json",
            "STORE_JSON_PATH": "/tmp/rentals.json",
            "POSTGRES_HOST": "db",
            "POSTGRES_PORT": "5433",
            "KAFKA_BOOTSTRAP_SERVERS": "kafka:9092",
            "KAFKA_TOPIC": "rentals.audit",
            "EVENTS_SINK": "kafka",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EngineConfig.from_env()

        assert config.verification.mode == "http"
        assert config.verification.api_key == "secret"
        assert config.verification.timeout_seconds == 2.5
        assert config.store.backend == "json"
        assert config.store.json_path == Path("/tmp/rentals.json")
        assert config.postgres.port == 5433
        assert config.kafka.topic == "rentals.audit"
        assert config.events_sink == "kafka"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("rental_engine").level == logging.INFO

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        logger = logging.getLogger()
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("psycopg").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        defaults = dict(
            name="rental_engine.test",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Applied %s",
            args=("rental.status_changed",),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "rental_engine.test"
        assert data["message"] == "Applied rental.status_changed"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))

        assert "ValueError: Test error" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"request_id": "req-1", "event_type": "rental.status_changed"}

        data = json.loads(JsonFormatter().format(record))

        assert data["request_id"] == "req-1"
        assert data["event_type"] == "rental.status_changed"


class TestPackageInit:
    """Tests for package metadata."""

    def test_version_exported(self) -> None:
        assert __version__ == "0.1.0"
