"""Workflow failure diagnosis: root-cause analysis, log evidence, error patterns and reporting."""

from .analyzer import analyze_failures, find_failed_nodes, find_root_causes, has_descendant, is_upstream
from .classifier import ERROR_PATTERN_RULES, classify_root_causes, detect_error_pattern
from .collector import DEFAULT_LOG_TAIL_LINES, DEFAULT_MAX_LOG_BYTES, TRUNCATION_MARKER, EvidenceCollector
from .models import (
    Diagnosis,
    DiagnosisError,
    DiagnosisReport,
    ErrorPattern,
    FailureAnalysis,
    FailureRecord,
)
from .pipeline import diagnose_workflow
from .report import build_report

__all__ = [
    "analyze_failures",
    "find_failed_nodes",
    "find_root_causes",
    "has_descendant",
    "is_upstream",
    "ERROR_PATTERN_RULES",
    "classify_root_causes",
    "detect_error_pattern",
    "DEFAULT_LOG_TAIL_LINES",
    "DEFAULT_MAX_LOG_BYTES",
    "TRUNCATION_MARKER",
    "EvidenceCollector",
    "Diagnosis",
    "DiagnosisError",
    "DiagnosisReport",
    "ErrorPattern",
    "FailureAnalysis",
    "FailureRecord",
    "diagnose_workflow",
    "build_report",
]
