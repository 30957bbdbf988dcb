# MIT License
#
# Copyright (c) 2024 SQL Report Integrator Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Signature-based deduplication of recommendations.

Recommendations coming from different dimensions frequently describe the
same fix. Each recommendation is reduced to a keyword signature built from
the start of its title and description; recommendations sharing a signature
are merged into the first one seen (the anchor).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import replace

from .base import NormalizedRecommendation

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX_LENGTH = 50
MIN_KEYWORD_LENGTH = 3
MERGED_EXCERPT_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

STOP_WORDS = frozenset(
    {
        "的",
        "是",
        "在",
        "有",
        "和",
        "与",
        "或",
        "但",
        "如果",
        "那么",
        "the",
        "is",
        "in",
        "and",
        "or",
        "but",
        "if",
        "then",
        "for",
        "to",
        "with",
        "by",
        "from",
    }
)

_WHITESPACE = re.compile(r"\s+")


def generate_signature(title: str, description: str = "") -> str:
    """Build the dedup signature for a title/description pair.

    Args:
        title: Recommendation title
        description: Recommendation description

    Returns:
        Sorted keywords joined with ``|``
    """
    combined = f"{title.strip().lower()} {description.strip().lower()}"
    combined = combined[:SIGNATURE_PREFIX_LENGTH]

    keywords = [
        word
        for word in _WHITESPACE.split(combined)
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]
    return "|".join(sorted(keywords))


def signature_similarity(first: str, second: str) -> float:
    """Share of the longer signature's keywords that both signatures contain.

    Returns:
        Similarity between 0 and 1
    """
    if first == second:
        return 1.0
    if not first or not second:
        return 0.0

    first_words = first.split("|")
    second_words = second.split("|")
    shorter, longer = sorted((first_words, second_words), key=len)

    longer_set = set(longer)
    common = sum(1 for word in shorter if word in longer_set)
    return common / len(longer)


class Deduplicator:
    """Merges recommendations whose signatures match.

    By default only identical signatures merge. With ``fuzzy`` enabled, a
    recommendation whose signature has no exact anchor merges into the first
    anchor with keyword overlap at or above ``similarity_threshold``.
    """

    def __init__(self, similarity_threshold: float = 0.8, fuzzy: bool = False):
        self.similarity_threshold = similarity_threshold
        self.fuzzy = fuzzy

    def deduplicate(
        self, recommendations: Iterable[NormalizedRecommendation]
    ) -> list[NormalizedRecommendation]:
        """Merge duplicate recommendations, keeping first-seen order.

        Input recommendations are not modified; anchors are copies.

        Args:
            recommendations: Extracted recommendations in pipeline order

        Returns:
            One recommendation per distinct signature
        """
        deduplicated: list[NormalizedRecommendation] = []
        anchors: dict[str, NormalizedRecommendation] = {}
        merged = 0

        for rec in recommendations:
            signature = generate_signature(rec.title, rec.description)
            anchor = anchors.get(signature)
            if anchor is None and self.fuzzy:
                anchor = self._find_similar_anchor(signature, anchors)

            if anchor is not None:
                logger.debug(f"Merging {rec.id} into {anchor.id} (signature: {signature})")
                self.merge(anchor, rec)
                merged += 1
            else:
                anchor = replace(rec)
                deduplicated.append(anchor)
                anchors[signature] = anchor

        if merged:
            logger.info(
                f"Merged {merged} duplicate recommendations, {len(deduplicated)} remain"
            )
        return deduplicated

    def _find_similar_anchor(
        self, signature: str, anchors: dict[str, NormalizedRecommendation]
    ) -> NormalizedRecommendation | None:
        for anchor_signature, anchor in anchors.items():
            similarity = signature_similarity(signature, anchor_signature)
            if similarity >= self.similarity_threshold:
                return anchor
        return None

    @staticmethod
    def merge(anchor: NormalizedRecommendation, duplicate: NormalizedRecommendation) -> None:
        """Fold a duplicate into its anchor in place.

        Severity and impact take the higher of the two, sources are unioned
        in order, and an excerpt of the duplicate's description is appended.
        """
        if duplicate.severity.rank > anchor.severity.rank:
            anchor.severity = duplicate.severity

        if duplicate.impact.rank > anchor.impact.rank:
            anchor.impact = duplicate.impact

        new_sources = [s for s in duplicate.sources if s not in anchor.sources]
        if new_sources:
            anchor.sources = anchor.sources + tuple(new_sources)

        if duplicate.description and len(anchor.description) < MAX_DESCRIPTION_LENGTH:
            excerpt = duplicate.description[:MERGED_EXCERPT_LENGTH]
            combined = f"{anchor.description} | {excerpt}"
            anchor.description = combined[:MAX_DESCRIPTION_LENGTH]
