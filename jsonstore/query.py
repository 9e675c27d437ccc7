"""
Key matching for JSONStore.query / JSONStore.get_all.

Wildcard patterns are split on "*" and a key matches when it contains ANY
of the non-empty fragments: "name:*" matches "name:1" and "myname:2", and
"a*b" matches every key containing "a" or "b". This is an OR of substrings,
not glob matching.
"""

from __future__ import annotations

import re
from typing import Iterable

WILDCARD = "*"


def is_wildcard(pattern: str) -> bool:
    return WILDCARD in pattern


def wildcard_fragments(pattern: str) -> list[str]:
    return [frag for frag in pattern.split(WILDCARD) if frag]


def match_wildcard(keys: Iterable[str], pattern: str) -> list[str]:
    fragments = wildcard_fragments(pattern)
    if not fragments:
        return []
    return [key for key in keys if any(frag in key for frag in fragments)]


def compile_regex(regex: str | re.Pattern[str]) -> re.Pattern[str]:
    return regex if isinstance(regex, re.Pattern) else re.compile(regex)


def match_regex(keys: Iterable[str], regex: str | re.Pattern[str]) -> list[str]:
    rx = compile_regex(regex)
    return [key for key in keys if rx.search(key)]
