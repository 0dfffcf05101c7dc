"""Transit feed validation engine."""
from .collector import IssueCollector
from .engine import CHECKS, validate_feed, validate_source
from .index import ModelIndex
from .issues import SEVERITIES, Issue, IssueKind, Severity
from .metadata import Metadata
from .report import Report
from .rules import RuleConfig, RuleConfigError, load_rules

__all__ = [
    "CHECKS",
    "SEVERITIES",
    "Issue",
    "IssueCollector",
    "IssueKind",
    "Metadata",
    "ModelIndex",
    "Report",
    "RuleConfig",
    "RuleConfigError",
    "Severity",
    "load_rules",
    "validate_feed",
    "validate_source",
]
