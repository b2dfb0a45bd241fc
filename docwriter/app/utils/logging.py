"""Structured logging for session transitions, persistence failures and generation."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredSessionLogger:
    """Structured logger for the editing session."""

    def log_transition(self, from_mode: str, to_mode: str) -> None:
        """Log a persistence mode change."""
        log_data: dict[str, Any] = {"event": "mode_transition", "from": from_mode, "to": to_mode}
        logger.info(f"Session mode {from_mode} -> {to_mode}", extra={"structured": log_data})

    def log_persistence_failure(self, backend: str, operation: str, cause: str) -> None:
        """Log a failure that degrades the session."""
        log_data: dict[str, Any] = {
            "event": "persistence_failure",
            "backend": backend,
            "operation": operation,
            "cause": cause,
        }
        logger.error(
            f"Persistence failure ({backend} {operation}): {cause}",
            extra={"structured": log_data},
        )

    def log_generation(
        self,
        section_id: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one generation request with its outcome."""
        log_data: dict[str, Any] = {
            "event": "generation",
            "section_id": section_id,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Generation for section {section_id} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
