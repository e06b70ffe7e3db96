"""Per-term posting statistics."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=True)
class Posting:
    """Statistics for one term: per-document counts plus two aggregates.

    Postings order by ``total_term_frequency`` descending, so ``sorted()``
    puts the most frequent term first. Equal frequencies are unordered here;
    callers needing a stable order add their own tie-break.
    """

    per_document_frequency: dict[str, int] = field(default_factory=dict)
    total_term_frequency: int = 0
    total_document_frequency: int = 0

    def record(self, doc_id: str) -> None:
        """Fold one occurrence of the term in ``doc_id``."""
        self.per_document_frequency[doc_id] = self.per_document_frequency.get(doc_id, 0) + 1
        self.total_term_frequency += 1
        self.total_document_frequency = len(self.per_document_frequency)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Posting):
            return NotImplemented
        return self.total_term_frequency > other.total_term_frequency

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Posting):
            return NotImplemented
        return self.total_term_frequency < other.total_term_frequency
