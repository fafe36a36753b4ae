"""
Fuzzy Option Matcher

Recovers near-miss enum values ("Wellnes", "Health Coach") by mapping them
to the closest declared option value.
"""

import re
from typing import List, Optional, Sequence

from config.constants import FUZZY_MATCH_MAX_DISTANCE


def hyphenate(value: str) -> str:
    """Lowercase and collapse whitespace runs into hyphens."""
    return re.sub(r"\s+", "-", value.lower())


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein edit distance between two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Minimum number of single-character insertions, deletions or
        substitutions turning s1 into s2
    """
    m, n = len(s1), len(s2)

    # Create distance matrix
    dp = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if s1[i - 1] == s2[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j], dp[i][j - 1], dp[i - 1][j - 1])

    return dp[m][n]


def find_closest_match(
    value: Optional[str],
    valid_options: Sequence[str],
    max_distance: int = FUZZY_MATCH_MAX_DISTANCE
) -> Optional[str]:
    """
    Find the option a submitted value most likely meant.

    Priority:
        1. Case-insensitive exact match, or equal after hyphenation
        2. Substring containment in either direction
        3. Smallest Levenshtein distance within `max_distance`

    Args:
        value: Submitted value
        valid_options: Declared option values
        max_distance: Largest edit distance still considered a match

    Returns:
        The matching option value, or None when nothing is close enough
    """
    if not value or not valid_options:
        return None

    value_lower = value.lower()
    value_hyphenated = hyphenate(value)

    for option in valid_options:
        if option.lower() == value_lower or hyphenate(option) == value_hyphenated:
            return option

    for option in valid_options:
        option_lower = option.lower()
        if option_lower in value_lower or value_lower in option_lower:
            return option

    best_match = None
    best_score = max_distance + 1

    for option in valid_options:
        score = levenshtein_distance(value_lower, option.lower())
        if score < best_score:
            best_score = score
            best_match = option

    return best_match


def unmatched_values(values: Sequence, valid_options: Sequence[str]) -> List:
    """Values that are not literally one of the options."""
    return [v for v in values if v not in valid_options]
