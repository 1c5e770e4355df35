"""CODEOWNERS parsing and path matching.

Matching follows the gitignore-derived semantics GitHub documents for
CODEOWNERS:

- A pattern with a leading or interior ``/`` is anchored at the repository
  root; otherwise it matches at any depth (``*.js``, ``logs``).
- ``*`` matches within one path segment, ``?`` one non-``/`` character,
  ``**`` any number of segments, ``[...]`` a character class.
- A pattern that matches a directory also owns everything beneath it. A
  trailing ``/`` restricts the pattern to directories. A final ``/*``
  segment owns direct children only (``docs/*`` does not own
  ``docs/api/x.md``).
- The last matching rule wins. A rule without owners makes matching paths
  unowned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


def _split_tokens(line: str) -> list[str]:
    """Split a CODEOWNERS line on unescaped whitespace, dropping comments.

    Backslash escapes are kept in the token for the pattern compiler, except
    ``\\ `` and ``\\#`` which collapse to the bare character.
    """
    tokens: list[str] = []
    buf: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line):
            nxt = line[i + 1]
            buf.append(nxt if nxt in " #" else ch + nxt)
            i += 2
            continue
        if ch == "#" and not buf:
            break
        if ch.isspace():
            if buf:
                tokens.append("".join(buf))
                buf = []
        else:
            buf.append(ch)
        i += 1
    if buf:
        tokens.append("".join(buf))
    return tokens


def _translate(body: str) -> str:
    """Translate a glob body (no leading/trailing slash) into a regex fragment."""
    out: list[str] = []
    i, n = 0, len(body)
    while i < n:
        ch = body[i]
        if ch == "*":
            if body.startswith("**", i):
                at_segment_start = i == 0 or body[i - 1] == "/"
                if at_segment_start and body.startswith("**/", i):
                    out.append("(?:.*/)?")
                    i += 3
                    continue
                if at_segment_start and i + 2 == n:
                    out.append(".*")
                    i += 2
                    continue
                out.append("[^/]*")
                i += 2
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            close = body.find("]", i + 2 if body.startswith("[!", i) or body.startswith("[^", i) else i + 1)
            if close == -1:
                out.append(re.escape(ch))
            else:
                inner = body[i + 1 : close]
                if inner[:1] in ("!", "^"):
                    inner = "^" + inner[1:].replace("\\", "\\\\")
                else:
                    inner = inner.replace("\\", "\\\\")
                out.append(f"[{inner}]")
                i = close
        elif ch == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(body[i]))
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile one CODEOWNERS pattern into a full-path regex."""
    dir_only = pattern.endswith("/")
    body = pattern.strip("/")
    anchored = pattern.startswith("/") or "/" in body

    if not body:
        # "/" alone owns the whole tree
        return re.compile(r"^.*$")

    prefix = "^" if anchored else "^(?:.*/)?"
    if dir_only:
        suffix = "/.*$"
    elif body == "*" or body.endswith("/*"):
        suffix = "$"
    else:
        suffix = "(?:/.*)?$"
    return re.compile(prefix + _translate(body) + suffix)


def normalize_path(path: str) -> str:
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


@dataclass(frozen=True)
class OwnershipRule:
    pattern: str
    owners: tuple[str, ...]
    line_number: int
    regex: re.Pattern[str] = field(compare=False, repr=False, default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.regex is None:
            object.__setattr__(self, "regex", compile_pattern(self.pattern))

    def matches(self, path: str) -> bool:
        return self.regex.match(normalize_path(path)) is not None


@dataclass(frozen=True)
class OwnershipRuleSet:
    """Ordered CODEOWNERS rules; immutable once built.

    ``source_path`` is the CODEOWNERS location the rules were read from, or
    None when no ownership file existed.
    """

    rules: tuple[OwnershipRule, ...] = ()
    source_path: Optional[str] = None

    @classmethod
    def empty(cls) -> OwnershipRuleSet:
        return cls()

    @classmethod
    def parse(cls, content: str, source_path: Optional[str] = None) -> OwnershipRuleSet:
        rules = []
        for line_number, raw in enumerate(content.splitlines(), start=1):
            tokens = _split_tokens(raw.strip())
            if not tokens:
                continue
            pattern, owners = tokens[0], tuple(tokens[1:])
            if pattern.startswith("!"):
                logger.debug("Skipping negated CODEOWNERS pattern %r (line %d)", pattern, line_number)
                continue
            rules.append(OwnershipRule(pattern=pattern, owners=owners, line_number=line_number))
        return cls(rules=tuple(rules), source_path=source_path)

    @property
    def found(self) -> bool:
        return self.source_path is not None

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[OwnershipRule]:
        return iter(self.rules)

    def matching_rule(self, path: str) -> Optional[OwnershipRule]:
        for rule in reversed(self.rules):
            if rule.matches(path):
                return rule
        return None

    def owners_of(self, path: str) -> tuple[str, ...]:
        """Owners of ``path``; empty when no rule (or an owner-less rule) matches."""
        rule = self.matching_rule(path)
        return rule.owners if rule is not None else ()

    def all_owners(self) -> list[str]:
        """Every owner named in the file, in order of first appearance."""
        seen: dict[str, None] = {}
        for rule in self.rules:
            for owner in rule.owners:
                seen.setdefault(owner, None)
        return list(seen)
