"""Wire the stages: history -> ownership -> membership -> attribution -> ranking.

Runs single-threaded. Commits are pulled one at a time, so a cancelled or
capped run still reports exactly the prefix it processed, while any error
raised by a stage propagates before a report exists.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .attribution.engine import AttributionEngine
from .attribution.enrich import EnrichmentStage
from .attribution.models import ContributorReportRow, EnrichedCommit, OwnerReportRow
from .attribution.ranker import Ranker
from .config import AttributionConfig
from .history.source import HistorySource
from .logging_config import get_logger
from .ownership.membership import MembershipIndex
from .ownership.resolver import OwnershipResolver

logger = get_logger(__name__)

ProgressCallback = Callable[[int, EnrichedCommit], None]


@dataclass
class AnalysisResult:
    owners: list[OwnerReportRow] = field(default_factory=list)
    contributors: list[ContributorReportRow] = field(default_factory=list)
    commits_processed: int = 0
    changes_processed: int = 0
    ownership_loads: int = 0
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "commits_processed": self.commits_processed,
            "changes_processed": self.changes_processed,
            "owners": [row.to_dict() for row in self.owners],
            "contributors": [row.to_dict() for row in self.contributors],
        }


def enriched_commits(
    source: HistorySource,
    memberships: Optional[MembershipIndex] = None,
    config: Optional[AttributionConfig] = None,
    resolver: Optional[OwnershipResolver] = None,
) -> EnrichmentStage:
    """Stream commits from ``source`` annotated with owners and membership."""
    config = config or AttributionConfig()
    if resolver is None:
        resolver = OwnershipResolver(source, locations=config.codeowners_locations)
    return EnrichmentStage(source.commits(), resolver, memberships)


def analyze(
    source: HistorySource,
    memberships: Optional[MembershipIndex] = None,
    config: Optional[AttributionConfig] = None,
    cancel_event: Optional[threading.Event] = None,
    on_commit: Optional[ProgressCallback] = None,
) -> AnalysisResult:
    """Run the full attribution over ``source`` and return ranked reports.

    Args:
        source: Ordered commit history
        memberships: Roster index; without one every author is an outsider
        config: Run configuration (defaults when omitted)
        cancel_event: When set, stop before the next commit
        on_commit: Called after each commit with (count, enriched commit)

    Raises:
        CodeownerInsightError: Any fatal stage error; no partial result
    """
    config = config or AttributionConfig()
    resolver = OwnershipResolver(source, locations=config.codeowners_locations)
    engine = AttributionEngine(adjusted=config.adjusted, unowned_label=config.unowned_label)

    cancelled = False
    stage = enriched_commits(source, memberships, config, resolver=resolver)
    try:
        for enriched in stage:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Analysis cancelled after %d commits", engine.commits_processed)
                cancelled = True
                break
            engine.apply(enriched)
            if on_commit is not None:
                on_commit(engine.commits_processed, enriched)
            if config.max_commits and engine.commits_processed >= config.max_commits:
                logger.info("Reached max_commits=%d, stopping", config.max_commits)
                break
    finally:
        stage.close()

    owners, contributors = Ranker(top_n=config.top_n, adjusted=config.adjusted).rank(engine)
    logger.info(
        "Processed %d commits (%d changes), %d owner groups, %d contributors, "
        "%d CODEOWNERS loads",
        engine.commits_processed,
        engine.changes_processed,
        len(owners),
        len(contributors),
        resolver.cache.load_count,
    )
    return AnalysisResult(
        owners=owners,
        contributors=contributors,
        commits_processed=engine.commits_processed,
        changes_processed=engine.changes_processed,
        ownership_loads=resolver.cache.load_count,
        cancelled=cancelled,
    )
