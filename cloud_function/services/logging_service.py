"""
Structured Logging Service - Cloud Logging integration.

Log entries go to Google Cloud Logging as structured payloads so that
summary requests can be filtered by request id, stage and classification.
Every entry is mirrored to the console for local runs.
"""
import json
import os
import sys
from datetime import datetime
from typing import Optional, Any


def _cloud_logging_wanted() -> bool:
    flag = os.environ.get("CLOUD_LOGGING_ENABLED")
    if flag is not None:
        return flag.lower() in ("1", "true", "yes")
    # Only inside the functions runtime by default
    return bool(os.environ.get("K_SERVICE"))


class StructuredLogger:
    """Provides structured logging for Cloud Logging integration."""

    def __init__(self, request_id: Optional[str] = None, enable_console: bool = True,
                 enable_cloud: Optional[bool] = None):
        """
        Initialize the structured logger.

        Args:
            request_id: Optional request ID to include in all log entries
            enable_console: If True, also prints to console (default: True)
            enable_cloud: Force the Cloud Logging sink on or off
        """
        self.request_id = request_id
        self.enable_console = enable_console
        self.cloud_logging_enabled = False

        if enable_cloud is None:
            enable_cloud = _cloud_logging_wanted()
        if enable_cloud:
            try:
                from google.cloud import logging as cloud_logging
                self.client = cloud_logging.Client()
                self.logger = self.client.logger("book-summary-function")
                self.cloud_logging_enabled = True
            except Exception as e:
                print(f"Warning: Cloud Logging initialization failed: {e}. Using console only.", file=sys.stderr)

    def info(self, message: str, **kwargs):
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log("DEBUG", message, **kwargs)

    def _log(self, severity: str, message: str, **kwargs):
        """
        Sends one entry to Cloud Logging and the console.

        Args:
            severity: Log severity (INFO, WARNING, ERROR, DEBUG)
            message: Log message
            **kwargs: Additional structured data to include
        """
        struct = {
            "message": message,
            "timestamp": datetime.utcnow().isoformat(),
            **kwargs
        }

        if self.request_id:
            struct["request_id"] = self.request_id

        if self.cloud_logging_enabled:
            try:
                self.logger.log_struct(struct, severity=severity)
            except Exception as e:
                print(f"Cloud Logging error: {e}", file=sys.stderr)

        if self.enable_console:
            console_msg = f"[{severity}] {message}"
            if self.request_id:
                console_msg = f"[{self.request_id}] {console_msg}"

            if kwargs:
                console_msg += f" | {json.dumps(kwargs, ensure_ascii=False, default=str)}"

            print(console_msg, file=sys.stderr if severity == "ERROR" else sys.stdout)


class RequestLogger:
    """Convenience wrapper for per-request logging."""

    def __init__(self, request_id: str):
        self.logger = StructuredLogger(request_id=request_id)
        self.request_id = request_id

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)

    def log_stage(self, stage: str, status: str, **kwargs):
        """
        Log a processing stage.

        Args:
            stage: Stage name (e.g., 'rate_check', 'invoke', 'fallback')
            status: Status (e.g., 'started', 'completed', 'failed')
        """
        self.logger.info(
            f"Stage: {stage} - {status}",
            stage=stage,
            status=status,
            **kwargs
        )

    def log_error(self, stage: str, error: str, **kwargs):
        self.logger.error(
            f"Error in {stage}: {error}",
            stage=stage,
            error=error,
            **kwargs
        )

    def log_metric(self, metric_name: str, value: Any, **kwargs):
        self.logger.info(
            f"Metric: {metric_name}={value}",
            metric=metric_name,
            value=value,
            **kwargs
        )


# Global logger instance for shared services
_global_logger = StructuredLogger()

def set_global_request_id(request_id: Optional[str]):
    """Set the request ID for the global logger."""
    _global_logger.request_id = request_id

def get_logger() -> StructuredLogger:
    """Get the global structured logger."""
    return _global_logger
