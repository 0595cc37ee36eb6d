"""Root-cause analysis over a workflow's execution graph.

The node mapping is treated as an arena: nodes reference each other only by
id, and every traversal keeps a visited set, so malformed graphs (dangling
ids, cycles) end the search instead of raising.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from ..models.execution_models import ExecutionNode
from .models import FailureAnalysis, FailureRecord

logger = logging.getLogger(__name__)

# Missing timestamps compare as the earliest possible instant.
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _instant(value: datetime | None) -> datetime:
    return value if value is not None else _EARLIEST


def find_failed_nodes(nodes: Mapping[str, ExecutionNode]) -> list[FailureRecord]:
    """Collect Failed/Error nodes as FailureRecords, ordered by start time."""
    failed = [FailureRecord.from_node(node) for node in nodes.values() if node.phase.is_failure]
    failed.sort(key=lambda record: (_instant(record.started_at), record.id))
    return failed


def has_descendant(nodes: Mapping[str, ExecutionNode], node_id: str, target_id: str) -> bool:
    """Return True if target_id is reachable from node_id along child edges."""
    visited: set[str] = set()
    stack = [node_id]

    while stack:
        current_id = stack.pop()
        if current_id in visited:
            continue
        visited.add(current_id)

        node = nodes.get(current_id)
        if node is None:
            continue
        for child_id in node.children:
            if child_id == target_id:
                return True
            if child_id not in visited:
                stack.append(child_id)

    return False


def is_upstream(nodes: Mapping[str, ExecutionNode], upstream_id: str, node_id: str) -> bool:
    """Return True if upstream_id encloses node_id or leads to it via children."""
    node = nodes.get(node_id)
    if node is not None and node.boundary_id and node.boundary_id == upstream_id:
        return True
    return has_descendant(nodes, upstream_id, node_id)


def _is_leaf_root_cause(
    nodes: Mapping[str, ExecutionNode], record: FailureRecord, failed: list[FailureRecord]
) -> bool:
    started = _instant(record.started_at)
    for other in failed:
        if other.id == record.id:
            continue
        if _instant(other.finished_at) < started and is_upstream(nodes, other.id, record.id):
            logger.debug(f"Node {record.id} attributed to earlier upstream failure {other.id}")
            return False
    return True


def find_root_causes(nodes: Mapping[str, ExecutionNode], failed: list[FailureRecord]) -> list[FailureRecord]:
    """Mark and return the failures that are not explained by an earlier failure.

    Leaf nodes (Pod, Container) are root causes unless a failure that finished
    before they started is upstream of them. Composite nodes are root causes
    only when none of their direct children failed. If nothing qualifies, the
    earliest failure is used so a non-empty failed set always has a root cause.
    """
    failed_ids = {record.id for record in failed}
    root_causes = []

    for record in failed:
        if record.type.is_leaf:
            is_root = _is_leaf_root_cause(nodes, record, failed)
        else:
            is_root = not any(child_id in failed_ids for child_id in record.children)

        record.is_root_cause = is_root
        if is_root:
            root_causes.append(record)

    if not root_causes and failed:
        fallback = failed[0]
        logger.debug(f"No root cause identified, falling back to earliest failure {fallback.id}")
        fallback.is_root_cause = True
        root_causes.append(fallback)

    return root_causes


def analyze_failures(nodes: Mapping[str, ExecutionNode]) -> FailureAnalysis:
    """Find the failed nodes of a workflow and which of them are root causes."""
    failed = find_failed_nodes(nodes)
    root_causes = find_root_causes(nodes, failed)
    logger.info(f"Found {len(failed)} failed node(s), {len(root_causes)} root cause(s)")
    return FailureAnalysis(failed_nodes=failed, root_causes=root_causes)
