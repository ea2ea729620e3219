"""
Problem Details (RFC 9457) payloads and the peergraph exception hierarchy.

Loader and engine failures carry a `ProblemDetail` so the CLI, or any remote
caller, can log or return one structured JSON object per failure.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import uuid4

PROBLEM_TYPE_BASE = "https://problems.peergraph.dev"


def generate_correlation_id() -> str:
    """
    Return a fresh identifier for one reported failure.

    Returns
    -------
    str
        Random UUID4 string used as the problem ``instance``.
    """
    return str(uuid4())


@dataclass(frozen=True)
class ProblemDetail:
    """
    Structured description of a failed load or metric run.

    ``code`` is the stable machine-readable key (``graph.parse_failed``);
    ``extras`` holds per-failure context such as the offending line.
    """

    type: str
    title: str
    detail: str
    status: int | None = None
    instance: str = field(default_factory=generate_correlation_id)
    code: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Return the payload with unset optional members omitted.

        Returns
        -------
        dict[str, Any]
            Mapping ready for ``json.dumps``.
        """
        optional = {"status": self.status, "code": self.code, "extras": self.extras or None}
        return {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "instance": self.instance,
            **{key: value for key, value in optional.items() if value is not None},
        }


def problem(
    code: str,
    title: str,
    detail: str,
    *,
    status: int | None = None,
    extras: dict[str, Any] | None = None,
) -> ProblemDetail:
    """
    Build a `ProblemDetail` whose type URI is derived from `code`.

    Parameters
    ----------
    code
        Dotted problem key, e.g. ``metric.compute_failed``.
    title
        Short summary shared by every problem with this code.
    detail
        Message specific to this occurrence.
    status
        HTTP-style status for callers that expose the problem over a network.
    extras
        Additional JSON-serializable context.

    Returns
    -------
    ProblemDetail
        Payload with a new correlation id.
    """
    return ProblemDetail(
        type=f"{PROBLEM_TYPE_BASE}/{code}",
        title=title,
        detail=detail,
        status=status,
        code=code,
        extras=dict(extras) if extras else {},
    )


def log_problem(logger: logging.Logger | logging.LoggerAdapter, detail: ProblemDetail) -> None:
    """Log `detail` at ERROR as a single JSON line."""
    logger.error(json.dumps(detail.to_dict(), sort_keys=True))


class ProblemError(Exception):
    """Exception whose message is the problem detail text."""

    def __init__(self, detail: ProblemDetail) -> None:
        super().__init__(detail.detail)
        self.problem_detail = detail


class PeerGraphError(ProblemError):
    """Base class for failures raised by graph loading and metric computation."""


class GraphReadError(PeerGraphError):
    """The edge-list file could not be opened or read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            problem(
                code="graph.read_failed",
                title="Graph file unreadable",
                detail=f"Cannot read edge list {path}: {reason}",
                status=404,
                extras={"path": str(path)},
            )
        )
        self.path = path


class GraphParseError(PeerGraphError):
    """An edge-list line is missing a token or carries a non-integer node id."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(
            problem(
                code="graph.parse_failed",
                title="Malformed edge list",
                detail=f"Line {line_number}: {reason}: {line!r}",
                status=400,
                extras={"line_number": line_number, "line": line},
            )
        )
        self.line_number = line_number
        self.line = line


class MetricComputationError(PeerGraphError):
    """A worker failed while computing a metric; no partial result was published."""

    def __init__(self, metric: str, reason: str) -> None:
        super().__init__(
            problem(
                code="metric.compute_failed",
                title="Metric computation failed",
                detail=f"{metric} computation aborted: {reason}",
                status=500,
                extras={"metric": metric},
            )
        )
        self.metric = metric


__all__ = [
    "GraphParseError",
    "GraphReadError",
    "MetricComputationError",
    "PeerGraphError",
    "ProblemDetail",
    "ProblemError",
    "generate_correlation_id",
    "log_problem",
    "problem",
]
