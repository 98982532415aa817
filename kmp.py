# Implementation of Knuth–Morris–Pratt algorithm for substring search
# Works on any indexable sequence of comparable symbols (str, bytes, lists)

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence


@dataclass
class SearchStats:
    """Counts the work done by a search, used to check the linear bound."""
    comparisons: int = 0
    fallbacks: int = 0


def build_lps(pattern: Sequence, stats: Optional[SearchStats] = None) -> List[int]:
    """
    Preprocess the pattern to create the longest prefix-suffix (LPS) array.
    lps[i] is the length of the longest proper prefix of pattern[:i + 1]
    that is also a suffix of it. The LPS array is used to skip characters
    while matching.
    """
    lps = [0] * len(pattern)
    length = 0  # Length of the previous longest prefix suffix
    i = 1

    while i < len(pattern):
        if stats is not None:
            stats.comparisons += 1
        if pattern[i] == pattern[length]:
            length += 1
            lps[i] = length
            i += 1
        elif length != 0:
            # Retry the same position against the next shorter border
            length = lps[length - 1]
            if stats is not None:
                stats.fallbacks += 1
        else:
            lps[i] = 0
            i += 1

    return lps


def _scan(
    text: Sequence,
    pattern: Sequence,
    lps: List[int],
    stop_at_first: bool,
    stats: Optional[SearchStats] = None,
) -> Iterator[int]:
    """
    Walk the text once, yielding the start offset of every occurrence.
    The text index never moves backward; on a mismatch only the pattern
    index falls back through the LPS table.
    """
    txt_len = len(text)
    pat_len = len(pattern)
    i = 0  # Index for text
    j = 0  # Index for pattern

    while i < txt_len:
        if stats is not None:
            stats.comparisons += 1
        if pattern[j] == text[i]:
            i += 1
            j += 1
            if j == pat_len:
                yield i - j
                if stop_at_first:
                    return
                # Keep the longest border so overlapping matches are found
                j = lps[j - 1]
        elif j != 0:
            j = lps[j - 1]
            if stats is not None:
                stats.fallbacks += 1
        else:
            i += 1


def search(
    text: Optional[Sequence],
    pattern: Optional[Sequence],
    stats: Optional[SearchStats] = None,
) -> Optional[int]:
    """
    Return the offset of the first occurrence of pattern in text, or None.

    A missing text never matches. A missing or empty pattern matches at
    offset 0, even against an empty text.
    """
    if text is None:
        return None
    if not pattern:
        return 0
    if not text or len(pattern) > len(text):
        return None

    lps = build_lps(pattern, stats)
    return next(_scan(text, pattern, lps, True, stats), None)


def search_all(
    text: Optional[Sequence],
    pattern: Optional[Sequence],
    stats: Optional[SearchStats] = None,
) -> List[int]:
    """
    KMP string searching algorithm.
    Returns a list of positions where pattern occurs in text, overlapping
    occurrences included. An empty pattern yields no positions.
    """
    if not pattern or not text or len(pattern) > len(text):
        return []

    lps = build_lps(pattern, stats)
    return list(_scan(text, pattern, lps, False, stats))


def count_comparisons(text: Optional[Sequence], pattern: Optional[Sequence]) -> SearchStats:
    """Run an all-matches search and return how much work it did."""
    stats = SearchStats()
    search_all(text, pattern, stats)
    return stats
