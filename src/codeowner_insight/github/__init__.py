"""GitHub team-membership roster builder."""

from .client import GithubApi, fetch_memberships, fetch_org_memberships, get_token

__all__ = ["GithubApi", "fetch_memberships", "fetch_org_memberships", "get_token"]
