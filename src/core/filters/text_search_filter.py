"""Free-text search over image titles and descriptions."""

import re

from core.models.image import ImageRecord

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> list[str]:
    """Split text into lower-cased word tokens."""
    return _WORD_RE.findall(text.lower())


class TextSearchFilter:
    """Match records against a free-text query and score their relevance.

    A record matches when any query term appears as a whole word in its
    title or description (case-insensitive). The relevance score counts
    term occurrences, with title hits weighted above description hits.
    """

    TITLE_WEIGHT = 2
    DESCRIPTION_WEIGHT = 1

    @classmethod
    def score(cls, record: ImageRecord, terms: list[str]) -> int:
        """Return the relevance of ``record`` for ``terms`` (0 = no match)."""
        if not terms:
            return 0

        wanted = set(terms)
        title_hits = sum(1 for token in tokenize(record.title) if token in wanted)
        description_hits = sum(
            1 for token in tokenize(record.description) if token in wanted
        )

        return title_hits * cls.TITLE_WEIGHT + description_hits * cls.DESCRIPTION_WEIGHT

    @classmethod
    def apply(cls, records: list[ImageRecord], search_term: str) -> dict[str, int]:
        """Return ``{record_id: score}`` for every matching record."""
        terms = tokenize(search_term)
        scores: dict[str, int] = {}

        for record in records:
            relevance = cls.score(record, terms)
            if relevance > 0:
                scores[record.record_id] = relevance

        return scores
