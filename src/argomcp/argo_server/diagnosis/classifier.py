"""Known failure signatures, matched against a failed node's evidence."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .models import ErrorPattern, FailureRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailureSignals:
    """Lower-cased evidence the rules match against."""

    exit_code: str
    message: str
    logs: str

    @classmethod
    def from_record(cls, record: FailureRecord) -> "FailureSignals":
        return cls(
            exit_code=(record.exit_code or "").strip(),
            message=record.message.lower(),
            logs=(record.logs or "").lower(),
        )


@dataclass(frozen=True)
class PatternRule:
    name: str
    matches: Callable[[FailureSignals], bool]
    pattern: ErrorPattern


def _in_message(*needles: str) -> Callable[[FailureSignals], bool]:
    return lambda s: any(needle in s.message for needle in needles)


def _in_logs(*needles: str) -> Callable[[FailureSignals], bool]:
    return lambda s: any(needle in s.logs for needle in needles)


def _in_message_or_logs(needle: str) -> Callable[[FailureSignals], bool]:
    return lambda s: needle in s.message or needle in s.logs


def _exit_code(code: str) -> Callable[[FailureSignals], bool]:
    return lambda s: s.exit_code == code


# Evaluated top to bottom; the first matching rule wins.
ERROR_PATTERN_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        "exit-137",
        _exit_code("137"),
        ErrorPattern(
            "Exit code 137 (OOMKilled or SIGKILL)",
            "The container was killed, likely due to out-of-memory (OOM). Consider increasing memory limits "
            "in the template's resources.limits.memory field.",
        ),
    ),
    PatternRule(
        "exit-139",
        _exit_code("139"),
        ErrorPattern(
            "Exit code 139 (Segmentation fault)",
            "The container crashed with a segmentation fault. This is typically a bug in the code or a native "
            "library issue.",
        ),
    ),
    PatternRule(
        "exit-143",
        _exit_code("143"),
        ErrorPattern(
            "Exit code 143 (SIGTERM)",
            "The container received SIGTERM, typically due to timeout or workflow termination. Check "
            "activeDeadlineSeconds settings.",
        ),
    ),
    PatternRule(
        "oom-killed",
        _in_message_or_logs("oomkilled"),
        ErrorPattern(
            "OOMKilled",
            "The container ran out of memory. Increase memory limits in the template's "
            "resources.limits.memory field.",
        ),
    ),
    PatternRule(
        "image-pull",
        _in_message("imagepullbackoff", "errimagepull"),
        ErrorPattern(
            "ImagePullBackOff",
            "Failed to pull container image. Check: 1) Image name and tag are correct, 2) Image exists in the "
            "registry, 3) imagePullSecrets are configured if using private registry.",
        ),
    ),
    PatternRule(
        "timeout",
        _in_message("deadline exceeded", "timeout"),
        ErrorPattern(
            "Timeout/Deadline exceeded",
            "The workflow or step exceeded its time limit. Consider increasing activeDeadlineSeconds at the "
            "workflow or template level.",
        ),
    ),
    PatternRule(
        "permission-denied",
        _in_message_or_logs("permission denied"),
        ErrorPattern(
            "Permission denied",
            "Permission error detected. Check: 1) ServiceAccount has required RBAC permissions, 2) "
            "File/directory permissions in container, 3) PodSecurityPolicy/SecurityContext settings.",
        ),
    ),
    PatternRule(
        "disk-full",
        _in_logs("no space left on device"),
        ErrorPattern(
            "No space left on device",
            "Disk space exhausted. Consider: 1) Increasing volume size, 2) Using ephemeral volumes, 3) "
            "Cleaning up artifacts between steps.",
        ),
    ),
    PatternRule(
        "python-exception",
        lambda s: "traceback" in s.logs and "error" in s.logs,
        ErrorPattern(
            "Python exception",
            "A Python exception occurred. Check the traceback in the logs for the specific error type and "
            "location.",
        ),
    ),
    PatternRule(
        "network",
        _in_logs("connection refused", "connection timed out"),
        ErrorPattern(
            "Network connection error",
            "Network connectivity issue. Check: 1) Target service is running and accessible, 2) Network "
            "policies allow the connection, 3) DNS resolution is working.",
        ),
    ),
)


def detect_error_pattern(
    record: FailureRecord, rules: tuple[PatternRule, ...] = ERROR_PATTERN_RULES
) -> ErrorPattern | None:
    """Return the pattern of the first rule matching the record, if any."""
    signals = FailureSignals.from_record(record)
    for rule in rules:
        if rule.matches(signals):
            logger.debug(f"Node {record.id} matched error pattern rule '{rule.name}'")
            return rule.pattern
    return None


def classify_root_causes(root_causes: list[FailureRecord]) -> None:
    """Attach a detected error pattern (or None) to every root cause."""
    for record in root_causes:
        record.error_pattern = detect_error_pattern(record)
