"""Tests for diagnosis report rendering and its formatting helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from argomcp.argo_server.diagnosis import Diagnosis, ErrorPattern, FailureRecord, build_report
from argomcp.argo_server.diagnosis.report import CLOSING, PREAMBLE
from argomcp.argo_server.models.execution_models import (
    InputBinding,
    NodeType,
    OutputBinding,
    Parameter,
)
from argomcp.utils.formatting import (
    format_duration,
    format_timestamp,
    parse_duration,
    parse_timestamp,
    truncate_string,
)


class TestFormatting:
    """Test duration, truncation and timestamp helpers."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [(45, "45s"), (330, "5m30s"), (8145, "2h15m45s"), (0, "0s"), (3600, "1h0m0s")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(timedelta(seconds=seconds)) == expected

    def test_truncate_short_string_unchanged(self):
        value = "a" * 50

        assert truncate_string(value, 100) == value

    def test_truncate_long_string(self):
        assert truncate_string("abcdefghij" * 10, 5) == "abcde..."

    def test_timestamp_round_trip_uses_z_suffix(self):
        parsed = parse_timestamp("2024-01-01T10:00:00Z")

        assert parsed == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)
        assert format_timestamp(parsed) == "2024-01-01T10:00:00Z"

    def test_zero_timestamps_are_unset(self):
        assert parse_timestamp("0001-01-01T00:00:00Z") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp("not a time") is None

    @pytest.mark.parametrize(
        "text, seconds",
        [("90s", 90), ("5m", 300), ("1h30m", 5400), ("1.5h", 5400), ("250ms", 0.25), ("0", 0)],
    )
    def test_parse_duration(self, text, seconds):
        assert parse_duration(text) == timedelta(seconds=seconds)

    @pytest.mark.parametrize("text", ["", "5", "m5", "5m banana", "-1s"])
    def test_parse_duration_rejects_malformed(self, text):
        with pytest.raises(ValueError, match="invalid duration"):
            parse_duration(text)


def _diagnosis(**kwargs):
    defaults = {
        "workflow_name": "etl",
        "namespace": "data",
        "phase": "Failed",
        "message": "child 'etl-1' failed",
        "started_at": datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
        "finished_at": datetime(2024, 1, 1, 10, 5, 30, tzinfo=timezone.utc),
        "duration": timedelta(seconds=330),
    }
    defaults.update(kwargs)
    return Diagnosis(**defaults)


def _root(**kwargs):
    defaults = {
        "id": "etl-1",
        "name": "etl.transform",
        "display_name": "transform",
        "template_name": "transform",
        "type": NodeType.POD,
        "message": "OOMKilled (exit code 137)",
        "exit_code": "137",
        "is_root_cause": True,
        "logs": "loading batch\nkilled\n",
    }
    defaults.update(kwargs)
    return FailureRecord(**defaults)


class TestBuildReport:
    """Test report sections and their order."""

    def test_preamble_and_closing(self):
        report = build_report(_diagnosis())

        assert report.startswith(PREAMBLE)
        assert report.endswith("---\n\n" + CLOSING)

    def test_overview(self):
        report = build_report(_diagnosis())

        assert "## Workflow: etl\nNamespace: data\nStatus: Failed\n" in report
        assert "Message: child 'etl-1' failed" in report
        assert "Started: 2024-01-01T10:00:00Z" in report
        assert "Finished: 2024-01-01T10:05:30Z" in report
        assert "Duration: 5m30s" in report

    def test_zero_duration_omitted(self):
        report = build_report(_diagnosis(duration=timedelta(0)))

        assert "Duration:" not in report

    def test_no_root_cause_section_without_failures(self):
        report = build_report(_diagnosis())

        assert "## Root Cause Node(s)" not in report
        assert "## Other Failed Nodes" not in report
        assert "## Detected Error Patterns" not in report

    def test_parameters_truncated(self):
        report = build_report(_diagnosis(parameters=[Parameter("input", "v" * 250), Parameter("mode", "fast")]))

        assert "### Workflow Parameters" in report
        assert f"- input: {'v' * 200}..." in report
        assert "- mode: fast" in report

    def test_root_cause_with_logs_and_pattern(self):
        root = _root(
            inputs=[
                InputBinding("rows", "1000", "parameter", "parameter: {{steps.count.outputs.result}}"),
                InputBinding("data", type="artifact", source="from: {{steps.gen.outputs.artifacts.data}}"),
            ],
            outputs=[OutputBinding("result", "ignored")],
            error_pattern=ErrorPattern("Exit code 137 (OOMKilled or SIGKILL)", "Increase memory."),
        )

        report = build_report(_diagnosis(failed_nodes=[root], root_causes=[root]))

        assert "### Node: transform (ROOT CAUSE)" in report
        assert "Template: transform\nPhase: Failed\n" in report
        assert "Exit Code: 137" in report
        assert "  - rows [param]: 1000 (source: parameter: {{steps.count.outputs.result}})" in report
        assert "  - data [artifact]: from: {{steps.gen.outputs.artifacts.data}}" in report
        assert "Outputs:" not in report
        assert "Logs (last lines):\n```\nloading batch\nkilled\n```" in report
        assert "### transform\n**Pattern**: Exit code 137 (OOMKilled or SIGKILL)\n**Suggestion**: Increase memory." in report

    def test_cascading_nodes_show_outputs_not_logs(self):
        root = _root()
        cascade = FailureRecord(
            id="etl",
            name="etl",
            type=NodeType.DAG,
            message="child failed",
            outputs=[OutputBinding("summary", "x" * 150), OutputBinding("report", type="artifact")],
            logs="should not appear",
        )

        report = build_report(_diagnosis(failed_nodes=[cascade, root], root_causes=[root]))

        section = report.split("## Other Failed Nodes (Cascading Failures)")[1]
        assert "### Node: etl\n" in section
        assert f"  - summary [param]: {'x' * 100}..." in section
        assert "  - report [artifact]" in section
        assert "should not appear" not in report

    def test_section_order(self):
        root = _root(error_pattern=ErrorPattern("P", "S"))
        cascade = FailureRecord(id="etl", name="etl", type=NodeType.DAG)

        report = build_report(
            _diagnosis(parameters=[Parameter("a", "1")], failed_nodes=[cascade, root], root_causes=[root])
        )

        positions = [
            report.index(heading)
            for heading in (
                "## Workflow:",
                "### Workflow Parameters",
                "## Root Cause Node(s)",
                "## Other Failed Nodes (Cascading Failures)",
                "## Detected Error Patterns",
                "---",
            )
        ]
        assert positions == sorted(positions)

    def test_raw_name_used_without_display_name(self):
        root = _root(name="etl.raw", display_name="", error_pattern=ErrorPattern("P", "S"))

        report = build_report(_diagnosis(failed_nodes=[root], root_causes=[root]))

        assert "### Node: etl.raw (ROOT CAUSE)" in report
        patterns = report.split("## Detected Error Patterns")[1]
        assert "### etl.raw\n**Pattern**: P" in patterns
