"""Cross-provider deduplication by URL and normalized headline."""

from __future__ import annotations

import re
from typing import Dict, List, MutableSequence, Optional, Sequence

from models import Article

# Both titles must be longer than this for containment to count as a match
MIN_CONTAINMENT_LENGTH = 20

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    text = _PUNCTUATION.sub("", str(title or "").lower())
    return _WHITESPACE.sub(" ", text).strip()


def is_duplicate(first: Article, second: Article) -> bool:
    """Same URL, same normalized title, or one long title contained in the other."""
    if first.url and second.url and first.url == second.url:
        return True

    title_a = normalize_title(first.title)
    title_b = normalize_title(second.title)
    if title_a == title_b:
        return True

    # Truncated headlines from different providers
    if len(title_a) > MIN_CONTAINMENT_LENGTH and len(title_b) > MIN_CONTAINMENT_LENGTH:
        shorter, longer = sorted((title_a, title_b), key=len)
        if shorter in longer:
            return True

    return False


def merge_articles(
    target: MutableSequence[Article],
    incoming: Sequence[Article],
    source_label: str,
    contributions: Optional[Dict[str, int]] = None,
) -> int:
    """Append incoming articles that duplicate nothing already in ``target``.

    Each candidate is compared against everything merged so far, so the
    first-seen record of a duplicate pair is the one kept.
    Returns the number of articles added; when ``contributions`` is given the
    count is credited to ``source_label``.
    """
    added = 0
    for article in incoming:
        if any(is_duplicate(existing, article) for existing in target):
            continue
        target.append(article)
        added += 1

    if added and contributions is not None:
        contributions[source_label] = contributions.get(source_label, 0) + added
    return added


def dedup(articles: Sequence[Article]) -> List[Article]:
    """Drop duplicates from a single list, keeping first occurrences."""
    unique: List[Article] = []
    merge_articles(unique, articles, "dedup")
    return unique
