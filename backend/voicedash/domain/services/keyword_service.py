"""
Keyword Service
Frequency-based keyword extraction from transcripts and per-tenant aggregation
"""
import logging
import re
import time
from collections import Counter
from typing import Callable, List, Optional

from voicedash.domain.interfaces.persistence_gateway import PersistenceGateway
from voicedash.domain.models.keyword import KeywordAggregate

logger = logging.getLogger(__name__)


MAX_KEYWORDS = 20
MIN_OCCURRENCES = 2
MIN_LENGTH = 4

STOP_WORDS = frozenset({
    "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you", "your",
    "yours", "yourself", "yourselves", "he", "him", "his", "himself", "she",
    "her", "hers", "herself", "it", "its", "itself", "they", "them", "their",
    "theirs", "themselves", "what", "which", "who", "whom", "this", "that",
    "these", "those", "am", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "having", "do", "does", "did", "doing", "a", "an",
    "the", "and", "but", "if", "or", "because", "as", "until", "while", "of",
    "at", "by", "for", "with", "about", "against", "between", "into",
    "through", "during", "before", "after", "above", "below", "to", "from",
    "up", "down", "in", "out", "on", "off", "over", "under", "again",
    "further", "then", "once", "here", "there", "when", "where", "why", "how",
    "all", "both", "each", "few", "more", "most", "other", "some", "such",
    "no", "nor", "not", "only", "own", "same", "so", "than", "too", "very",
    "s", "t", "can", "will", "just", "don", "should", "now",
    # Conversational filler
    "yeah", "yes", "okay", "ok", "um", "uh", "like", "know", "think", "get",
    "got", "would", "could", "want", "need", "see", "go", "going", "come",
    "let", "one", "two", "make",
})

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(
    transcript: Optional[str],
    max_keywords: int = MAX_KEYWORDS,
    min_occurrences: int = MIN_OCCURRENCES
) -> List[str]:
    """
    Most frequent meaningful words in a transcript.

    Words shorter than four characters, stop words and purely numeric
    tokens are dropped. Ties keep first-occurrence order.
    """
    if not transcript:
        return []

    text = _PUNCTUATION.sub(" ", transcript.lower())
    words = [
        word for word in text.split()
        if len(word) >= MIN_LENGTH and word not in STOP_WORDS and not word.isdigit()
    ]

    counts = Counter(words)
    frequent = [(word, n) for word, n in counts.items() if n >= min_occurrences]
    # sorted() is stable and Counter preserves insertion order
    frequent = sorted(frequent, key=lambda item: item[1], reverse=True)

    return [word for word, _ in frequent[:max_keywords]]


def sentiment_score(sentiment: Optional[str]) -> int:
    if sentiment == "Positive":
        return 1
    if sentiment == "Negative":
        return -1
    return 0


class KeywordAggregator:
    """
    Folds a call's keywords into the tenant's running aggregates.

    Each keyword is a separate read-modify-write against the gateway.
    Concurrent merges for the same keyword may lose an increment.
    """

    def __init__(self, gateway: PersistenceGateway, clock: Callable[[], float] = time.time):
        self.gateway = gateway
        self._clock = clock

    def merge(self, tenant_id: str, keywords: List[str], sentiment: Optional[str]) -> int:
        """
        Merge keywords tagged with one call's sentiment.

        Returns:
            Number of keywords successfully merged
        """
        score = sentiment_score(sentiment)
        now = int(self._clock())
        merged = 0

        for keyword in keywords:
            try:
                self._merge_one(tenant_id, keyword, score, now)
                merged += 1
            except Exception as e:
                logger.error(f"Failed to merge keyword '{keyword}' for tenant {tenant_id}: {e}")

        return merged

    def _merge_one(self, tenant_id: str, keyword: str, score: int, now: int) -> None:
        existing = self.gateway.get_keyword(tenant_id, keyword)

        if existing is None:
            aggregate = KeywordAggregate(
                tenant_id=tenant_id,
                keyword=keyword,
                count=1,
                positive_count=1 if score > 0 else 0,
                neutral_count=1 if score == 0 else 0,
                negative_count=1 if score < 0 else 0,
                avg_sentiment=float(score),
                last_detected_at=now,
                created_at=now,
            )
            self.gateway.save_keyword(aggregate, is_new=True)
            return

        new_count = existing.count + 1
        aggregate = existing.model_copy(update={
            "count": new_count,
            "positive_count": existing.positive_count + (1 if score > 0 else 0),
            "neutral_count": existing.neutral_count + (1 if score == 0 else 0),
            "negative_count": existing.negative_count + (1 if score < 0 else 0),
            "avg_sentiment": (existing.avg_sentiment * existing.count + score) / new_count,
            "last_detected_at": now,
        })
        self.gateway.save_keyword(aggregate, is_new=False)
