"""
codeowner-insight - CODEOWNERS-aware attribution of git history.

Answers "how much of the code owned by team X was changed by team X vs.
outsiders, and by whom?" by replaying commit history against the
CODEOWNERS file in force at each commit.
"""

__version__ = "0.1.0"

from .attribution import AttributionEngine, OwnerReportRow, ContributorReportRow, Ranker
from .config import AttributionConfig, load_config
from .exceptions import CodeownerInsightError
from .history import CommitRecord, GitHistorySource, HistorySource, parse_commits
from .ownership import MembershipIndex, OwnershipResolver, OwnershipRuleSet, read_roster, write_roster
from .pipeline import AnalysisResult, analyze

__all__ = [
    "__version__",
    "AnalysisResult",
    "AttributionConfig",
    "AttributionEngine",
    "CodeownerInsightError",
    "CommitRecord",
    "ContributorReportRow",
    "GitHistorySource",
    "HistorySource",
    "MembershipIndex",
    "OwnerReportRow",
    "OwnershipResolver",
    "OwnershipRuleSet",
    "Ranker",
    "analyze",
    "load_config",
    "parse_commits",
    "read_roster",
    "write_roster",
]
