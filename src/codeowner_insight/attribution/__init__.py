"""Attribution: enrichment, accumulation and ranking."""

from .engine import AttributionEngine, commit_weights
from .enrich import EnrichmentStage, enrich_commit
from .models import (
    AdjustedTotals,
    ContributorAccumulator,
    ContributorInfo,
    ContributorOwnerStats,
    ContributorReportRow,
    ContributorTally,
    EnrichedChange,
    EnrichedCommit,
    OwnerAccumulator,
    OwnerBreakdown,
    OwnerReportRow,
)
from .ranker import Ranker, top_contributors

__all__ = [
    "AdjustedTotals",
    "AttributionEngine",
    "ContributorAccumulator",
    "ContributorInfo",
    "ContributorOwnerStats",
    "ContributorReportRow",
    "ContributorTally",
    "EnrichedChange",
    "EnrichedCommit",
    "EnrichmentStage",
    "OwnerAccumulator",
    "OwnerBreakdown",
    "OwnerReportRow",
    "Ranker",
    "commit_weights",
    "enrich_commit",
    "top_contributors",
]
