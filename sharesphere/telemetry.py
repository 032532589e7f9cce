"""OpenTelemetry metrics and logs for ShareSphere."""

import logging
import os
from decimal import Decimal

from opentelemetry import metrics
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from sharesphere._version import VERSION


# Module-level state
_initialized = False
_meter = None
_log_handler = None

# Counters (cumulative)
_trades_total = None
_trade_volume_total = None
_trade_value_total = None
_trades_rejected_total = None
_trade_conflicts_total = None


def setup_telemetry() -> bool:
    """Initialize OpenTelemetry metrics and log export.

    Returns True if telemetry was initialized, False if disabled.
    """
    global _initialized, _meter, _log_handler
    global _trades_total, _trade_volume_total, _trade_value_total
    global _trades_rejected_total, _trade_conflicts_total

    if _initialized:
        return True

    if os.getenv("OTLP_ENABLED", "true").lower() == "false":
        return False

    otlp_endpoint = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/metrics")
    export_interval = int(os.getenv("OTLP_EXPORT_INTERVAL", "5000"))

    resource = Resource.create({
        "service.name": "sharesphere",
        "service.version": VERSION,
    })

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=otlp_endpoint),
        export_interval_millis=export_interval,
    )
    provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(provider)

    _meter = metrics.get_meter("sharesphere", VERSION)

    _trades_total = _meter.create_counter(
        "sharesphere_trades_total",
        description="Total number of trades executed",
        unit="1",
    )

    _trade_volume_total = _meter.create_counter(
        "sharesphere_trade_volume_total",
        description="Total number of shares bought or sold",
        unit="shares",
    )

    _trade_value_total = _meter.create_counter(
        "sharesphere_trade_value_total",
        description="Total cash value of executed trades",
        unit="currency",
    )

    _trades_rejected_total = _meter.create_counter(
        "sharesphere_trades_rejected_total",
        description="Trade requests that failed validation or rolled back",
        unit="1",
    )

    _trade_conflicts_total = _meter.create_counter(
        "sharesphere_trade_conflicts_total",
        description="Trade attempts retried after a concurrent modification",
        unit="1",
    )

    # === LOGS ===
    logs_endpoint = otlp_endpoint.replace("/v1/metrics", "/v1/logs")
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=logs_endpoint))
    )
    set_logger_provider(logger_provider)

    _log_handler = LoggingHandler(
        level=logging.INFO,
        logger_provider=logger_provider,
    )

    _initialized = True
    return True


def get_log_handler() -> LoggingHandler | None:
    """Get the OTLP logging handler to attach to Python loggers."""
    return _log_handler


# --- Counter update functions ---

def record_trade(trade_type: str, company: str, quantity: int, price: Decimal) -> None:
    """Record an executed trade."""
    if not _initialized:
        return

    attributes = {"type": trade_type, "company": company}
    _trades_total.add(1, attributes)
    _trade_volume_total.add(quantity, attributes)
    _trade_value_total.add(float(price * quantity), attributes)


def record_trade_rejected(trade_type: str, reason: str) -> None:
    """Record a trade request that did not execute."""
    if not _initialized:
        return

    _trades_rejected_total.add(1, {"type": trade_type, "reason": reason})


def record_trade_conflict(trade_type: str) -> None:
    """Record a retry caused by a concurrent update."""
    if not _initialized:
        return

    _trade_conflicts_total.add(1, {"type": trade_type})
