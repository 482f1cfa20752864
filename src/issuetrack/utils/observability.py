"""Observability utilities for metrics, logging, and request correlation."""
import contextvars
import logging
import re
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)
from pythonjsonlogger import jsonlogger

# ============================================================================
# Prometheus Metrics
# ============================================================================

# Private registry, so tests and multiple apps never collide on the default one
REGISTRY = CollectorRegistry()

# Domain Metrics
issues_created_counter = Counter(
    "issuetrack_issues_created_total",
    "Total number of issues created",
    registry=REGISTRY,
)

issue_creation_failures_counter = Counter(
    "issuetrack_issue_creation_failures_total",
    "Total number of issue creations that rolled back",
    ["error_kind"],
    registry=REGISTRY,
)

authorization_denied_counter = Counter(
    "issuetrack_authorization_denied_total",
    "Total number of requests rejected by workspace authorization",
    ["reason"],  # reason: not_member, insufficient_role
    registry=REGISTRY,
)

# API Request Metrics
http_requests_total = Counter(
    "issuetrack_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_request_duration_histogram = Histogram(
    "issuetrack_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)


# ============================================================================
# Metrics Helper Functions
# ============================================================================


def record_issue_created() -> None:
    """Record a committed issue creation."""
    issues_created_counter.inc()


def record_issue_creation_failure(error_kind: str) -> None:
    """Record an issue creation that was rolled back."""
    issue_creation_failures_counter.labels(error_kind=error_kind).inc()


def record_authorization_denied(reason: str) -> None:
    """Record a request rejected by the authorization guard."""
    authorization_denied_counter.labels(reason=reason).inc()


def record_http_request(method: str, endpoint: str, status_code: int) -> None:
    """Record HTTP request."""
    http_requests_total.labels(
        method=method, endpoint=endpoint, status_code=str(status_code)
    ).inc()


def record_http_duration(method: str, endpoint: str, duration_seconds: float) -> None:
    """Record HTTP request duration."""
    http_request_duration_histogram.labels(method=method, endpoint=endpoint).observe(
        duration_seconds
    )


def get_metrics() -> bytes:
    """Get Prometheus metrics in text format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST


# ============================================================================
# Structured Logging
# ============================================================================


class CorrelationIdFilter(logging.Filter):
    """Add correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per record, with correlation and domain ids at the top level."""

    context_keys = ("correlation_id", "user_id", "workspace_id", "team_id", "issue_id")

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        for key in self.context_keys:
            value = getattr(record, key, None)
            if value is not None:
                log_record[key] = str(value)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure the root logger.

    Args:
        log_level: Level name, e.g. ``INFO``
        log_format: ``json`` for one JSON object per line, ``text`` for
            human readable lines
    """
    if log_format == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"
        )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))


# ============================================================================
# Correlation ID Management
# ============================================================================

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID from current context."""
    return _correlation_id_var.get()


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


@contextmanager
def correlation_context(correlation_id: Optional[str] = None):
    """Context manager for correlation ID."""
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    token = _correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id_var.reset(token)


# ============================================================================
# Helper Functions
# ============================================================================

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)
_ISSUE_IDENTIFIER_RE = re.compile(r"/[A-Z]{2,5}-\d+(/|$)")


def sanitize_endpoint(path: str) -> str:
    """
    Sanitize endpoint path for metrics.

    Replaces UUIDs and issue identifiers with placeholders to avoid
    high cardinality in metrics.
    """
    path = _UUID_RE.sub("{id}", path)
    path = _ISSUE_IDENTIFIER_RE.sub(r"/{identifier}\1", path)
    return path
