"""Tests for event sinks."""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from confluent_kafka import KafkaException

from rental_engine.config import KafkaConfig
from rental_engine.exceptions import SinkError
from rental_engine.models.base import Event
from rental_engine.models.rental import RentalStatus
from rental_engine.sinks.console import ConsoleSink
from rental_engine.sinks.kafka import KafkaSink, ProducerStats
from rental_engine.sinks.serialization import to_dict


@pytest.fixture
def sample_event() -> Event:
    """Status change event."""
    return Event(
        event_id="evt-001",
        event_type="rental.status_changed",
        event_time=datetime(2024, 6, 1, 10, 30),
        source="rental-engine",
        subject="req-test-001",
        data={"from": "pending", "to": RentalStatus.DOCUMENT_VERIFICATION},
    )


class TestToDict:
    """Tests for to_dict function."""

    def test_dataclass(self, sample_event: Event) -> None:
        result = to_dict(sample_event)

        assert result["event_time"] == "2024-06-01T10:30:00"
        assert result["data"] == {"from": "pending", "to": "document_verification"}
        assert result["metadata"] == {}

    def test_dict_passthrough(self) -> None:
        assert to_dict({"key": "value"}) == {"key": "value"}

    def test_other_type(self) -> None:
        assert to_dict(42) == {"value": "42"}


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_send(self, capsys: pytest.CaptureFixture, sample_event: Event) -> None:
        sink = ConsoleSink(pretty=False)

        sink.send("rentals.lifecycle", sample_event, key="req-test-001")
        captured = capsys.readouterr()

        prefix, payload = captured.out.split(" ", 1)
        assert prefix == "[rentals.lifecycle:req-test-001]"
        assert json.loads(payload)["event_type"] == "rental.status_changed"
        assert sink._counts["rentals.lifecycle"] == 1

    def test_write_batch_and_close(self, capsys: pytest.CaptureFixture, sample_event: Event) -> None:
        sink = ConsoleSink(pretty=True)

        sink.write_batch("rentals.lifecycle", [sample_event, {"id": 2}])
        sink.close()
        captured = capsys.readouterr()

        assert "2 records" in captured.out
        assert "Console Sink Summary" in captured.out
        assert "rentals.lifecycle: 2 records" in captured.out


class TestKafkaSinkMocked:
    """Tests for KafkaSink using mocks (no actual Kafka connection)."""

    @pytest.fixture
    def producer(self) -> MagicMock:
        with patch("rental_engine.sinks.kafka.Producer") as mock_producer_cls:
            yield mock_producer_cls

    def test_producer_stats_success_rate(self) -> None:
        assert ProducerStats(sent=10, delivered=9, failed=1).success_rate == 0.9
        assert ProducerStats().success_rate == 0.0

    def test_init_from_string(self, producer: MagicMock) -> None:
        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        producer.assert_called_once_with(KafkaConfig(bootstrap_servers="kafka:9092").to_dict())

    def test_send_keys_by_subject(self, producer: MagicMock, sample_event: Event) -> None:
        sink = KafkaSink(KafkaConfig())

        sink.send("rentals.lifecycle", sample_event)

        kwargs = producer.return_value.produce.call_args.kwargs
        assert kwargs["topic"] == "rentals.lifecycle"
        assert kwargs["key"] == b"req-test-001"
        assert json.loads(kwargs["value"])["subject"] == "req-test-001"
        producer.return_value.poll.assert_called_with(0)
        assert sink.stats.sent == 1

    def test_send_failure_raises_sink_error(self, producer: MagicMock, sample_event: Event) -> None:
        producer.return_value.produce.side_effect = BufferError("queue full")
        sink = KafkaSink(KafkaConfig())

        with pytest.raises(SinkError, match="queue full"):
            sink.send("rentals.lifecycle", sample_event)
        assert sink.stats.sent == 0

    def test_kafka_exception_raises_sink_error(self, producer: MagicMock, sample_event: Event) -> None:
        producer.return_value.produce.side_effect = KafkaException("broker down")
        sink = KafkaSink(KafkaConfig())

        with pytest.raises(SinkError):
            sink.send("rentals.lifecycle", sample_event)

    def test_delivery_callback(self, producer: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig())
        msg = MagicMock()
        msg.topic.return_value = "rentals.lifecycle"
        msg.partition.return_value = 0
        msg.offset.return_value = 7

        sink._delivery_callback(None, msg)
        sink._delivery_callback("timeout", msg)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    def test_write_batch_flushes(self, producer: MagicMock, sample_event: Event) -> None:
        sink = KafkaSink(KafkaConfig())

        sink.write_batch("rentals.lifecycle", [sample_event, sample_event])

        assert producer.return_value.produce.call_count == 2
        producer.return_value.flush.assert_called_once_with(30.0)

    def test_close_flushes(self, producer: MagicMock) -> None:
        sink = KafkaSink(KafkaConfig())

        sink.close()

        producer.return_value.flush.assert_called_once()
