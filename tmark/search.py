"""Fuzzy matching over bookmarks"""

from typing import Iterable, List, Tuple

from rapidfuzz import fuzz, process

from tmark.models import AliasEntry

DEFAULT_THRESHOLD = 60


def suggest_aliases(name: str, aliases: Iterable[str], threshold: int = DEFAULT_THRESHOLD, limit: int = 3) -> List[str]:
    """Return the aliases that look most like ``name``, best first"""
    choices = list(aliases)
    if not name or not choices:
        return []
    matches = process.extract(
        name.lower(),
        choices,
        scorer=fuzz.ratio,
        processor=str.lower,
        limit=limit,
        score_cutoff=threshold,
    )
    return [choice for choice, _score, _index in matches]


def search_entries(term: str, entries: Iterable[AliasEntry], threshold: int = DEFAULT_THRESHOLD) -> List[Tuple[AliasEntry, float]]:
    """Score entries against ``term`` by alias and path, highest first"""
    search_term = term.lower()
    results = []
    for entry in entries:
        # Search across alias and path, keep the highest score
        alias_score = fuzz.partial_ratio(search_term, entry.alias.lower())
        path_score = fuzz.partial_ratio(search_term, entry.path.lower())
        score = max(alias_score, path_score)
        if score >= threshold:
            results.append((entry, score))

    results.sort(key=lambda x: x[1], reverse=True)
    return results
