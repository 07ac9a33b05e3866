"""Structured logging for dialogue transitions and searches."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredDialogueLogger:
    """Structured logger for dialogue and search events."""

    def log_transition(
        self,
        user_key: str,
        flow: str,
        step_from: str | None,
        step_to: str | None,
        outcome: str,
        error_reason: str | None = None,
    ) -> None:
        """Log one handled message with structured data."""
        log_data: dict[str, Any] = {
            "user_key": user_key,
            "flow": flow,
            "step_from": step_from,
            "step_to": step_to,
            "outcome": outcome,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Dialogue {flow}: {step_from} -> {step_to} ({outcome})"

        if outcome in ("aborted", "expired"):
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_search(
        self,
        user_key: str,
        kind: str,
        query: str,
        result_count: int,
        latency_ms: float,
    ) -> None:
        """Log one search with structured data."""
        log_data: dict[str, Any] = {
            "user_key": user_key,
            "kind": kind,
            "query": query,
            "result_count": result_count,
            "latency_ms": round(latency_ms, 2),
        }
        logger.info(f"Search {kind}: {result_count} results", extra={"structured": log_data})
