"""Error taxonomy: structured codes grouped by pipeline stage.

Error Code Convention:
    CI1xx - Ingestion errors (git log stream, git subprocess)
    CI2xx - Ownership errors (reading CODEOWNERS at a commit)
    CI3xx - Roster errors (membership TSV)
    CI4xx - GitHub API errors
    CI5xx - Configuration errors
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Structured error codes for observability and debugging."""

    # Ingestion errors (CI1xx)
    CI100 = "CI100"  # Unclassified ingestion failure
    CI101 = "CI101"  # Malformed commit block in history stream
    CI102 = "CI102"  # Git executable missing or exited non-zero

    # Ownership errors (CI2xx)
    CI201 = "CI201"  # Repository content unreadable at commit

    # Roster errors (CI3xx)
    CI301 = "CI301"  # Roster line has wrong field count
    CI302 = "CI302"  # Roster file unreadable / unwritable

    # GitHub errors (CI4xx)
    CI401 = "CI401"  # API request failed or returned unexpected payload
    CI402 = "CI402"  # No token available

    # Configuration errors (CI5xx)
    CI500 = "CI500"  # Unclassified configuration failure
    CI501 = "CI501"  # Invalid configuration value


STAGES = {
    "CI1": "ingestion",
    "CI2": "ownership",
    "CI3": "roster",
    "CI4": "github",
    "CI5": "configuration",
}


def stage_for(code: ErrorCode) -> str:
    """Map an error code to the pipeline stage that raised it."""
    return STAGES.get(code.value[:3], "unknown")
