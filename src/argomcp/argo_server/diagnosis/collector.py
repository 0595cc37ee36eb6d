"""Bounded log collection for root-cause nodes."""

import logging
from collections.abc import AsyncIterator, Callable

from .models import FailureRecord

logger = logging.getLogger(__name__)

DEFAULT_LOG_TAIL_LINES = 50
DEFAULT_MAX_LOG_BYTES = 50_000
LOG_CONTAINER = "main"
TRUNCATION_MARKER = "\n... (logs truncated)"

# (namespace, workflow_name, node_name, tail_lines) -> async stream of log lines
LogSource = Callable[[str, str, str, int], AsyncIterator[str]]


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _cut_to_bytes(text: str, max_bytes: int) -> str:
    if max_bytes <= 0:
        return ""
    return text.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


def truncate_to_budget(logs: str, remaining: int) -> str:
    """Cut logs so that logs plus the truncation marker fill exactly `remaining` bytes."""
    marker_bytes = _byte_length(TRUNCATION_MARKER)
    if remaining <= marker_bytes:
        return _cut_to_bytes(TRUNCATION_MARKER, remaining)
    return _cut_to_bytes(logs, remaining - marker_bytes) + TRUNCATION_MARKER


async def read_log_stream(
    source: LogSource, namespace: str, workflow_name: str, node_name: str, tail_lines: int
) -> str:
    """Read a node's log stream to the end, keeping whatever arrived before an error."""
    lines = []
    try:
        async for line in source(namespace, workflow_name, node_name, tail_lines):
            lines.append(line)
            lines.append("\n")
    except Exception as e:
        logger.debug(f"Log stream for node {node_name} ended with error after {len(lines) // 2} line(s): {e}")
    return "".join(lines)


class EvidenceCollector:
    """Attach tail logs to root-cause records under a shared byte budget."""

    def __init__(
        self,
        source: LogSource,
        tail_lines: int = DEFAULT_LOG_TAIL_LINES,
        max_bytes: int = DEFAULT_MAX_LOG_BYTES,
    ):
        self.source = source
        self.tail_lines = tail_lines
        self.max_bytes = max_bytes

    async def collect(self, namespace: str, workflow_name: str, root_causes: list[FailureRecord]) -> int:
        """Fetch logs for each root cause in order, returning the bytes collected.

        Once the budget is used up no further fetches are made; the record whose
        logs cross the budget has them cut and marked as truncated.
        """
        total_bytes = 0

        for record in root_causes:
            if total_bytes >= self.max_bytes:
                logger.info(f"Log budget of {self.max_bytes} bytes reached, skipping remaining root causes")
                break

            logs = await read_log_stream(self.source, namespace, workflow_name, record.name, self.tail_lines)
            if not logs:
                continue

            remaining = self.max_bytes - total_bytes
            if _byte_length(logs) > remaining:
                logs = truncate_to_budget(logs, remaining)

            record.logs = logs
            total_bytes += _byte_length(logs)
            logger.debug(f"Collected {_byte_length(logs)} bytes of logs for node {record.name}")

        return total_bytes
