"""In-memory name index over an immutable contribution record set."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rapidfuzz import fuzz, process

from .normalization import normalize_name, tokenize
from .schema import (
    FUZZY_MATCH_LIMIT,
    FUZZY_MIN_TOKEN_LENGTH,
    FUZZY_THRESHOLD,
    Contribution,
    RecordSet,
)

logger = logging.getLogger(__name__)


def token_score(token: str, name: str, *, score_cutoff: float | None = None, **kwargs) -> float:
    """
    How well ``token`` appears somewhere inside ``name``, on a 0-100 scale.

    The token is aligned along the name, never the other way round: a name
    shorter than the token is scored as a whole-string comparison, so "wong"
    does not match the name "ng".
    """
    if len(name) < len(token):
        return fuzz.ratio(token, name, score_cutoff=score_cutoff)
    return fuzz.partial_ratio(token, name, score_cutoff=score_cutoff)


class SearchIndex:
    """
    Exact and fuzzy name lookup over a fixed record set.

    The index is built once from the full record set and is read-only
    afterwards, so any number of threads may query it concurrently.

    Exact mode matches records whose normalized name contains the normalized
    query as a substring. Fuzzy mode splits the normalized query into tokens
    and requires every usable token to approximately match somewhere in the
    record's normalized name. Fuzzy mode never returns more than
    ``match_limit`` records.
    """

    def __init__(
        self,
        records: Iterable[Contribution],
        *,
        threshold: float = FUZZY_THRESHOLD,
        min_token_length: int = FUZZY_MIN_TOKEN_LENGTH,
        match_limit: int = FUZZY_MATCH_LIMIT,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        if match_limit < 1:
            raise ValueError(f"match_limit must be positive, got {match_limit}")

        self._records: RecordSet = tuple(records)
        self._names: list[str] = [r.name_normalized for r in self._records]
        self.threshold = threshold
        self.min_token_length = min_token_length
        self.match_limit = match_limit
        # rapidfuzz scores run 0-100; a threshold of 0.3 keeps scores >= 70
        self._score_cutoff = (1.0 - threshold) * 100
        logger.debug("Indexed %d contributions", len(self._records))

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> RecordSet:
        return self._records

    def lookup(self, name: str | None, *, fuzzy: bool = False) -> list[Contribution]:
        """Normalize a raw name and look it up in the requested mode."""
        normalized = normalize_name(name)
        return self.fuzzy(normalized) if fuzzy else self.exact(normalized)

    def exact(self, normalized: str) -> list[Contribution]:
        """Records whose normalized name contains ``normalized``, in load order."""
        return [r for r in self._records if normalized in r.name_normalized]

    def fuzzy(self, normalized: str) -> list[Contribution]:
        """
        Records matching every usable token of ``normalized`` approximately.

        Tokens shorter than ``min_token_length`` are ignored. Candidates are
        ranked by combined token score (ties in load order) and cut to
        ``match_limit`` before any further filtering happens.
        """
        tokens = [t for t in tokenize(normalized) if len(t) >= self.min_token_length]
        if not tokens:
            return list(self._records[: self.match_limit])

        scores: dict[int, float] = {}
        for position, token in enumerate(tokens):
            if position == 0:
                choices: list[str] | dict[int, str] = self._names
            else:
                choices = {i: self._names[i] for i in scores}
                if not choices:
                    break
            matches = process.extract(
                token,
                choices,
                scorer=token_score,
                score_cutoff=self._score_cutoff,
                limit=None,
            )
            # Conjunctive: only records that matched every token so far survive
            scores = {key: scores.get(key, 0.0) + score for _, score, key in matches}

        ranked = sorted(scores, key=lambda i: (-scores[i], i))
        if len(ranked) > self.match_limit:
            logger.debug(
                "Fuzzy query %r matched %d records, capped at %d",
                normalized,
                len(ranked),
                self.match_limit,
            )
        return [self._records[i] for i in ranked[: self.match_limit]]
