"""Ownership resolution: CODEOWNERS rules, per-commit resolver, team rosters."""

from .membership import MembershipEntry, MembershipIndex
from .resolver import OwnershipCache, OwnershipResolver, load_codeowners
from .roster import read_roster, write_roster
from .rules import OwnershipRule, OwnershipRuleSet, compile_pattern

__all__ = [
    "MembershipEntry",
    "MembershipIndex",
    "OwnershipCache",
    "OwnershipResolver",
    "OwnershipRule",
    "OwnershipRuleSet",
    "compile_pattern",
    "load_codeowners",
    "read_roster",
    "write_roster",
]
