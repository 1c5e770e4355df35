"""Resolve the CODEOWNERS rules in force at each commit.

Ownership files change rarely compared to commit volume, so the resolver
reloads only when a commit touches one of the well-known CODEOWNERS
locations and otherwise hands back the cached rule set. That shortcut is
only correct when commits arrive in one consistent chronological order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..config import DEFAULT_CODEOWNERS_LOCATIONS
from ..history.models import CommitRecord
from ..history.source import HistorySource
from ..logging_config import get_logger
from .rules import OwnershipRuleSet

logger = get_logger(__name__)


@dataclass
class OwnershipCache:
    """Per-resolver cache state; one instance per analysis."""

    rule_set: Optional[OwnershipRuleSet] = None
    last_commit_checked: Optional[str] = None
    load_count: int = 0
    loaded_at: list[str] = field(default_factory=list)


def load_codeowners(
    source: HistorySource,
    commit_id: str,
    locations: Sequence[str] = DEFAULT_CODEOWNERS_LOCATIONS,
) -> tuple[Optional[str], Optional[str]]:
    """Return (location, content) of the first CODEOWNERS file present at the commit."""
    for location in locations:
        content = source.read_file_at_commit(commit_id, location)
        if content is not None:
            return location, content
    return None, None


class OwnershipResolver:
    """Hands out the OwnershipRuleSet effective at a commit, with caching."""

    def __init__(
        self,
        source: HistorySource,
        locations: Sequence[str] = DEFAULT_CODEOWNERS_LOCATIONS,
        cache: Optional[OwnershipCache] = None,
    ):
        self.source = source
        self.locations = tuple(locations)
        self.cache = cache if cache is not None else OwnershipCache()

    def touches_ownership_file(self, commit: CommitRecord) -> bool:
        return not commit.changed_paths.isdisjoint(self.locations)

    def resolve(self, commit: CommitRecord) -> OwnershipRuleSet:
        cache = self.cache
        if cache.rule_set is None or self.touches_ownership_file(commit):
            cache.rule_set = self.load(commit.id)
        cache.last_commit_checked = commit.id
        return cache.rule_set

    def load(self, commit_id: str) -> OwnershipRuleSet:
        """Fetch and parse the ownership file at ``commit_id``, bypassing the cache."""
        location, content = load_codeowners(self.source, commit_id, self.locations)
        self.cache.load_count += 1
        self.cache.loaded_at.append(commit_id)
        if content is None:
            logger.debug("No CODEOWNERS file at %s", commit_id)
            return OwnershipRuleSet.empty()
        rule_set = OwnershipRuleSet.parse(content, source_path=location)
        logger.debug("Loaded %d CODEOWNERS rules from %s at %s", len(rule_set), location, commit_id)
        return rule_set
