"""Structured logging setup for machine-readable operation logs."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog


class StructuredLogger:
    """Handles structured JSON logging for worklog operations."""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_file: Optional[Path] = None
        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            self.log_file = log_path / "operations.jsonl"

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="ISO"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer(),
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        self.logger = structlog.get_logger("tempo_mcp_server.operations")

    def log_operation_start(self, operation: str, **context: Any) -> None:
        """Log tool operation start."""
        self.logger.info(
            "operation_started",
            operation=operation,
            timestamp=datetime.now().isoformat(),
            **context,
        )

    def log_operation_complete(
        self,
        operation: str,
        duration_ms: int,
        status: str = "success",
        details: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        """Log tool operation completion."""
        log_entry: Dict[str, Any] = {
            "operation": operation,
            "status": status,
            "duration_ms": duration_ms,
            "details": details or {},
            "timestamp": datetime.now().isoformat(),
        }

        if error:
            log_entry["error"] = error

        self.logger.info("operation_completed", **log_entry)

        # Also write to file in JSONL format for easy parsing
        self._write_to_file(log_entry)

    def _write_to_file(self, log_entry: Dict[str, Any]) -> None:
        """Write log entry to JSONL file."""
        if self.log_file is None:
            return
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
        except OSError as e:
            # Don't fail the operation due to logging issues
            logging.getLogger(__name__).warning(f"Failed to write to log file: {e}")


def setup_console_logging(level: str) -> None:
    """Setup console logging on stderr.

    stdout is reserved for the MCP stdio transport.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
