"""
Database name filtering for MySQL Dump All.

Patterns come from the command line and are evaluated in order. In exact
mode every pattern is a literal database name to skip. In regex mode a
pattern selects databases, and a pattern prefixed with ':' rejects them;
the first matching pattern decides, so put specific rejections first:

    ':^mysql$' '^my'     dumps mydb but not mysql
    '^my' ':^mysql$'     dumps both, '^my' matches mysql first
"""

import logging
import re
from enum import Enum
from typing import Sequence

from .models import INTERNAL_SCHEMA

NEGATION_PREFIX = ':'


class Decision(Enum):
    """Outcome of matching a name against the pattern list."""
    INCLUDE = "include"
    EXCLUDE = "exclude"
    NO_MATCH = "no_match"


def split_negation(pattern: str) -> tuple[bool, str]:
    """Return (negated, expression) for a regex-mode pattern."""
    if pattern.startswith(NEGATION_PREFIX):
        return True, pattern[len(NEGATION_PREFIX):]
    return False, pattern


def validate_patterns(patterns: Sequence[str]) -> None:
    """Compile every regex-mode pattern, raising re.error on the first bad one."""
    for pattern in patterns:
        _, expression = split_negation(pattern)
        re.compile(expression)


def has_positive_pattern(patterns: Sequence[str]) -> bool:
    return any(not split_negation(p)[0] for p in patterns)


def evaluate(name: str, patterns: Sequence[str], regex: bool) -> Decision:
    """Return the decision of the first pattern matching ``name``."""
    if not regex:
        if name in patterns:
            return Decision.EXCLUDE
        return Decision.NO_MATCH

    for pattern in patterns:
        negated, expression = split_negation(pattern)
        if re.search(expression, name):
            logging.debug(f"Database '{name}' matched pattern '{pattern}'")
            return Decision.EXCLUDE if negated else Decision.INCLUDE
    return Decision.NO_MATCH


def should_dump(name: str, patterns: Sequence[str], regex: bool) -> bool:
    """Decide whether ``name`` is dumped."""
    if name == INTERNAL_SCHEMA:
        return False

    decision = evaluate(name, patterns, regex)
    if decision is Decision.INCLUDE:
        return True
    if decision is Decision.EXCLUDE:
        return False

    # Any selecting pattern turns the default into exclusion.
    if regex:
        return not has_positive_pattern(patterns)
    return True
