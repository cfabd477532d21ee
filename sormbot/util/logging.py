"""
Structured logging for bot operations.
Knowledge writes, interactions and rejections are logged as key/value details.
"""

import logging
import os
import sys
from typing import Any, Dict, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _truncate(value: str, limit: int = 50) -> str:
    return value[:limit] + "..." if len(value) > limit else value


class StructuredLogger:
    """Structured logger for knowledge, interaction and transport operations.

    Instances with the same name share one stdlib logger, so the latest level
    applies to all of them. Each log file gets at most one handler.
    """

    def __init__(self, name: str = "sormbot", level: str = "INFO", log_file: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
        formatter = logging.Formatter(LOG_FORMAT)

        if not any(type(h) is logging.StreamHandler for h in self.logger.handlers):
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        if log_file and not self._has_file_handler(log_file):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _has_file_handler(self, log_file: str) -> bool:
        path = os.path.abspath(log_file)
        return any(
            isinstance(h, logging.FileHandler) and h.baseFilename == path
            for h in self.logger.handlers
        )

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_knowledge_operation(self, operation: str, question: str, answer: str = None,
                                status: str = "success", error: Any = None):
        """Log a knowledge-store operation."""
        details = {"question": _truncate(question)}
        if answer is not None:
            details["answer"] = _truncate(answer)
        if error is not None:
            details["error"] = str(error)

        self.log_operation(f"knowledge.{operation}", status, details)

    def log_interaction(self, user_id: Any, username: str, message: str,
                        status: str = "success", error: Any = None):
        """Log an inbound message."""
        details = {"user_id": user_id, "username": username, "message": _truncate(message)}
        if error is not None:
            details["error"] = str(error)
        self.log_operation("interaction", status, details)

    def log_rejection(self, reason: str, raw_input: str):
        """Log a rejected teach attempt. Rejections are user errors, not faults."""
        details = {"reason": reason, "input": _truncate(raw_input)}
        self.log_operation("knowledge.teach", "rejected", details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str, exc_info: Any = False) -> None:
        """Log an error message."""
        self.logger.error(message, exc_info=exc_info)

    def critical(self, message: str) -> None:
        """Log a critical message."""
        self.logger.critical(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)
