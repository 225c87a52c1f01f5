"""
Structured JSON logging for the Moodcast service.
Provides request tracing and analysis/forecast summaries.

Request context lives in a ContextVar, so each in-flight request (one
asyncio task apiece) sees only its own request_id/endpoint.
"""

import os
import json
import logging
import uuid
from contextvars import ContextVar
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

_request_context: ContextVar[Dict[str, Any]] = ContextVar("moodcast_request_context", default={})


class StructuredLogger:
    """Structured JSON logger with request context."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    @property
    def request_context(self) -> Dict[str, Any]:
        return _request_context.get()

    def set_request_context(self, request_id: str, endpoint: Optional[str] = None,
                            method: Optional[str] = None):
        """Set request context for tracing.

        Args:
            request_id: Unique request identifier
            endpoint: API endpoint being called
            method: HTTP method
        """
        _request_context.set({
            "request_id": request_id,
            "endpoint": endpoint,
            "method": method,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def clear_context(self):
        """Clear request context."""
        _request_context.set({})

    def log(self, level: str, message: str, **kwargs):
        """Log message with structured context.

        Args:
            level: Log level ('debug', 'info', 'warning', 'error', 'critical')
            message: Log message
            **kwargs: Additional fields to include in JSON
        """
        log_data = {
            "message": message,
            **self.request_context,
            **kwargs,
        }

        getattr(self.logger, level)(json.dumps(log_data, default=str))

    def info(self, message: str, **kwargs):
        self.log("info", message, **kwargs)

    def error(self, message: str, exc_info: Optional[str] = None, **kwargs):
        self.log("error", message, exc_info=exc_info, **kwargs)

    def log_request(self, method: str, endpoint: str) -> str:
        """Log incoming request."""
        request_id = str(uuid.uuid4())
        self.set_request_context(request_id, endpoint, method)
        self.info(f"{method} {endpoint} received", request_id=request_id)
        return request_id

    def log_response(self, status_code: int, response_time_ms: float, error: Optional[str] = None):
        """Log outgoing response."""
        log_data = {
            "status_code": status_code,
            "response_time_ms": round(response_time_ms, 2),
        }

        if error:
            log_data["error"] = error
            self.error(f"Request failed with status {status_code}", **log_data)
        else:
            self.info(f"Request completed with status {status_code}", **log_data)

    def log_pattern_analysis(self, sample_count: int, hours_with_data: int,
                             days_with_data: int, elapsed_ms: float):
        """Log a pattern analysis run."""
        self.info(
            "Patterns analyzed",
            sample_count=sample_count,
            hours_with_data=hours_with_data,
            days_with_data=days_with_data,
            elapsed_ms=round(elapsed_ms, 2),
        )

    def log_forecast(self, sample_count: int, hours_ahead: int, mean_confidence: float,
                     dip_count: Optional[int] = None, elapsed_ms: float = 0.0):
        """Log a forecast run."""
        self.info(
            f"Forecast generated for {hours_ahead}h",
            sample_count=sample_count,
            hours_ahead=hours_ahead,
            mean_confidence=round(mean_confidence, 3),
            dip_count=dip_count,
            elapsed_ms=round(elapsed_ms, 2),
        )


def setup_json_logging(log_file: Optional[str] = None, level: str = "INFO"):
    """Setup JSON logging to file and console.

    Args:
        log_file: Optional file path for JSON logs
        level: Root log level name
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    json_formatter = jsonlogger.JsonFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(json_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

        root_logger.info(f"JSON logging initialized to {log_file}")


# Global structured logger instance
logger = StructuredLogger("moodcast")
