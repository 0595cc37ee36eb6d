"""Render a diagnosis as a markdown document for a human or an LLM to read."""

from datetime import timedelta

from ...utils.formatting import format_duration, format_timestamp, truncate_string
from .models import Diagnosis, FailureRecord

PARAMETER_VALUE_LIMIT = 200
BINDING_VALUE_LIMIT = 100

PREAMBLE = (
    "You are diagnosing a failed Argo Workflow. Analyse the following information and explain:\n"
    "1. What failed and why\n"
    "2. The root cause (trace back to the original failure)\n"
    "3. Any suspicious inputs or upstream issues\n"
    "4. Recommended fixes\n\n"
)

CLOSING = "Based on this information, explain the failure and suggest fixes.\n"


def _write_overview(lines: list[str], diagnosis: Diagnosis) -> None:
    lines.append(f"## Workflow: {diagnosis.workflow_name}")
    lines.append(f"Namespace: {diagnosis.namespace}")
    lines.append(f"Status: {diagnosis.phase}")
    if diagnosis.message:
        lines.append(f"Message: {diagnosis.message}")
    if diagnosis.started_at:
        lines.append(f"Started: {format_timestamp(diagnosis.started_at)}")
    if diagnosis.finished_at:
        lines.append(f"Finished: {format_timestamp(diagnosis.finished_at)}")
    if diagnosis.duration is not None and diagnosis.duration > timedelta(0):
        lines.append(f"Duration: {format_duration(diagnosis.duration)}")


def _write_node(lines: list[str], record: FailureRecord, full_details: bool) -> None:
    header = f"### Node: {record.label}"
    if record.is_root_cause:
        header += " (ROOT CAUSE)"
    lines.append(header)

    if record.template_name:
        lines.append(f"Template: {record.template_name}")
    lines.append(f"Phase: {record.phase.value}")
    if record.message:
        lines.append(f"Message: {record.message}")
    if record.exit_code:
        lines.append(f"Exit Code: {record.exit_code}")
    if record.started_at:
        lines.append(f"Started: {format_timestamp(record.started_at)}")
    if record.finished_at:
        lines.append(f"Finished: {format_timestamp(record.finished_at)}")

    if record.inputs:
        lines.append("")
        lines.append("Inputs:")
        for binding in record.inputs:
            if binding.type == "parameter":
                entry = f"  - {binding.name} [param]: {truncate_string(binding.value, BINDING_VALUE_LIMIT)}"
                if binding.source:
                    entry += f" (source: {binding.source})"
            elif binding.source:
                entry = f"  - {binding.name} [artifact]: {binding.source}"
            else:
                entry = f"  - {binding.name} [artifact]"
            lines.append(entry)

    # Outputs give context for cascading failures; root causes show logs instead.
    if record.outputs and not full_details:
        lines.append("")
        lines.append("Outputs:")
        for binding in record.outputs:
            if binding.type == "parameter":
                lines.append(f"  - {binding.name} [param]: {truncate_string(binding.value, BINDING_VALUE_LIMIT)}")
            else:
                lines.append(f"  - {binding.name} [artifact]")

    if full_details and record.logs:
        lines.append("")
        lines.append("Logs (last lines):")
        lines.append("```")
        lines.append(record.logs.rstrip("\n"))
        lines.append("```")

    lines.append("")


def build_report(diagnosis: Diagnosis) -> str:
    """Build the diagnosis document.

    Sections appear in a fixed order: instructions, workflow overview,
    parameters, root causes, cascading failures, detected error patterns and
    a closing instruction. Sections with nothing to show are omitted.
    """
    lines: list[str] = []
    _write_overview(lines, diagnosis)

    if diagnosis.parameters:
        lines.append("")
        lines.append("### Workflow Parameters")
        for param in diagnosis.parameters:
            lines.append(f"- {param.name}: {truncate_string(param.value, PARAMETER_VALUE_LIMIT)}")

    if diagnosis.root_causes:
        lines.append("")
        lines.append("## Root Cause Node(s)")
        lines.append("These are the nodes that appear to be the original source of failure:")
        lines.append("")
        for record in diagnosis.root_causes:
            _write_node(lines, record, full_details=True)

    root_ids = {record.id for record in diagnosis.root_causes}
    cascading = [record for record in diagnosis.failed_nodes if record.id not in root_ids]
    if cascading:
        lines.append("")
        lines.append("## Other Failed Nodes (Cascading Failures)")
        lines.append("These nodes failed as a result of upstream failures:")
        lines.append("")
        for record in cascading:
            _write_node(lines, record, full_details=False)

    patterned = [record for record in diagnosis.root_causes if record.error_pattern is not None]
    if patterned:
        lines.append("")
        lines.append("## Detected Error Patterns")
        for record in patterned:
            lines.append("")
            lines.append(f"### {record.label}")
            lines.append(f"**Pattern**: {record.error_pattern.label}")
            lines.append(f"**Suggestion**: {record.error_pattern.suggestion}")

    lines.append("")
    lines.append("---")
    lines.append("")
    return PREAMBLE + "\n".join(lines) + "\n" + CLOSING
