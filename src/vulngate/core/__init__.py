"""Core scan pipeline functionality.

Provides:
- Manifest discovery on disk and inside jar archives
- Scan request construction
- Issue extraction, severity scoring, filtering and ordering
- Report formatting and the build gate decision
"""

from .config import Config, load_config
from .evaluator import evaluate
from .gate import decide
from .manifests import gather_manifests
from .models import Issue, Manifest, ScanOutcome, ScanRequest, ScanResult
from .output import format_issue, format_report, format_summary
from .request import build_scan_request
from .severity import Severity, severity_score

__all__ = [
    "Config",
    "load_config",
    "evaluate",
    "decide",
    "gather_manifests",
    "Issue",
    "Manifest",
    "ScanOutcome",
    "ScanRequest",
    "ScanResult",
    "format_issue",
    "format_report",
    "format_summary",
    "build_scan_request",
    "Severity",
    "severity_score",
]
