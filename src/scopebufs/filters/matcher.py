"""
Compiled name filters.

A list of regular expressions is OR-composed into a single compiled pattern
once per configuration change. An empty list compiles to a pattern that can
never match, so an unconfigured filter never selects anything.
"""

import re
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from scopebufs.core.config import Settings
from scopebufs.core.exceptions import ConfigError
from scopebufs.core.settings import NEVER_MATCH_PATTERN

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Matcher:
    """An immutable compiled filter built from a tuple of patterns."""
    patterns: Tuple[str, ...]
    regex: "re.Pattern[str]"

    @property
    def is_empty(self) -> bool:
        return not self.patterns

    def match(self, name: Optional[str]) -> bool:
        if not name:
            return False
        return self.regex.search(name) is not None

    def __call__(self, name: Optional[str]) -> bool:
        return self.match(name)


def compile_patterns(patterns: Optional[Iterable[str]]) -> Matcher:
    """
    Compile a list of patterns into a single matcher.

    Args:
        patterns: Regular expressions; None or empty gives a never-matching filter

    Returns:
        The compiled Matcher

    Raises:
        ConfigError: If one of the patterns is not a valid regular expression
    """
    cleaned = tuple(p for p in (patterns or ()) if p)
    if not cleaned:
        return Matcher(patterns=(), regex=re.compile(NEVER_MATCH_PATTERN))

    for pattern in cleaned:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid filter pattern {pattern!r}: {e}") from e

    joined = "|".join(f"(?:{p})" for p in cleaned)
    try:
        regex = re.compile(joined)
    except re.error as e:
        raise ConfigError(f"Filter patterns cannot be combined: {e}") from e

    logger.debug("Compiled %d filter patterns", len(cleaned))
    return Matcher(patterns=cleaned, regex=regex)


def matches(matcher: Matcher, name: Optional[str]) -> bool:
    return matcher.match(name)


@dataclass(frozen=True)
class FilterSet:
    """The four filters used by the membership engine."""
    include: Matcher
    exclude: Matcher
    hidden: Matcher
    kill_exclude: Matcher

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilterSet":
        return cls(
            include=compile_patterns(settings.include_patterns),
            exclude=compile_patterns(settings.exclude_patterns),
            hidden=compile_patterns(settings.hidden_patterns),
            kill_exclude=compile_patterns(settings.kill_exclude_patterns),
        )
