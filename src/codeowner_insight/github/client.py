"""GitHub REST client for building team-membership rosters.

Walks org -> teams -> members -> user profile and emits one roster entry
per (member, team) with owner group ``@{org}/{team-slug}``, the handle form
CODEOWNERS files use.
"""

from __future__ import annotations

import os
import subprocess
from typing import Any, Callable, Iterator, Optional

import requests

from ..exceptions import GithubApiError, GithubTokenError
from ..logging_config import get_logger
from ..ownership.membership import MembershipEntry

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "codeowner-insight"
PER_PAGE = 100


def get_token() -> str:
    """GitHub token from ``GITHUB_TOKEN``, else from ``gh auth token``."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token.strip()

    try:
        result = subprocess.run(
            ["gh", "auth", "token"], capture_output=True, text=True, timeout=15
        )
    except FileNotFoundError:
        raise GithubTokenError("GITHUB_TOKEN not set and the gh CLI is not installed")
    except subprocess.TimeoutExpired:
        raise GithubTokenError("`gh auth token` timed out")

    if result.returncode != 0:
        raise GithubTokenError(f"`gh auth token` failed: {result.stderr.strip()}")
    token = result.stdout.strip()
    if not token:
        raise GithubTokenError("`gh auth token` returned an empty token")
    return token


class GithubApi:
    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout_seconds: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": USER_AGENT,
            }
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> GithubApi:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise GithubApiError(str(e), url=url)
        if not resp.ok:
            raise GithubApiError(resp.reason or "request failed", url=url, status=resp.status_code)
        return resp

    def get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            return self._get(url).json()
        except ValueError:
            raise GithubApiError("response is not JSON", url=url)

    def get_paginated(self, path: str) -> Iterator[dict[str, Any]]:
        """Yield every item of a list endpoint, following ``Link: rel="next"``."""
        url: Optional[str] = f"{self.base_url}{path}"
        params: Optional[dict[str, Any]] = {"per_page": PER_PAGE}
        while url:
            resp = self._get(url, params=params)
            try:
                page = resp.json()
            except ValueError:
                raise GithubApiError("response is not JSON", url=url)
            if not isinstance(page, list):
                raise GithubApiError("expected a JSON array", url=url)
            yield from page
            # the next link already carries the query string
            url = resp.links.get("next", {}).get("url")
            params = None

    def org_logins(self) -> list[str]:
        return _field_values(self.get_paginated("/user/orgs"), "login")

    def team_slugs(self, org: str) -> list[str]:
        return _field_values(self.get_paginated(f"/orgs/{org}/teams"), "slug")

    def team_members(self, org: str, team_slug: str) -> list[str]:
        return _field_values(
            self.get_paginated(f"/orgs/{org}/teams/{team_slug}/members"), "login"
        )

    def user_info(self, login: str) -> Optional[tuple[str, Optional[str]]]:
        """(display name, public email) for ``login``; name falls back to the login."""
        user = self.get_json(f"/users/{login}")
        if not isinstance(user, dict):
            return None
        name = user.get("name") or login
        email = user.get("email") or None
        return name, email


def _field_values(items: Iterator[dict[str, Any]], key: str) -> list[str]:
    values = []
    for item in items:
        value = item.get(key) if isinstance(item, dict) else None
        if isinstance(value, str):
            values.append(value)
    return values


def fetch_org_memberships(
    api: GithubApi,
    org: str,
    on_team: Optional[Callable[[str, int], None]] = None,
) -> list[MembershipEntry]:
    """Roster entries for every member of every team in ``org``.

    Profiles are fetched once per login even when a user sits in several
    teams.
    """
    entries: list[MembershipEntry] = []
    profiles: dict[str, Optional[tuple[str, Optional[str]]]] = {}
    for slug in api.team_slugs(org):
        members = api.team_members(org, slug)
        if on_team is not None:
            on_team(slug, len(members))
        group = f"@{org}/{slug}"
        for login in members:
            if login not in profiles:
                profiles[login] = api.user_info(login)
            profile = profiles[login]
            if profile is None:
                continue
            name, email = profile
            entries.append(MembershipEntry(author_email=email, author_name=name, owner_group=group))
    logger.info("Fetched %d memberships across org %s", len(entries), org)
    return entries


def fetch_memberships(
    api: GithubApi,
    orgs: Optional[list[str]] = None,
    on_team: Optional[Callable[[str, int], None]] = None,
) -> list[MembershipEntry]:
    """Roster for ``orgs``, or for every org the token's user belongs to."""
    if not orgs:
        orgs = api.org_logins()
        logger.info("Discovered %d organizations", len(orgs))
    entries: list[MembershipEntry] = []
    for org in orgs:
        entries.extend(fetch_org_memberships(api, org, on_team=on_team))
    return entries
