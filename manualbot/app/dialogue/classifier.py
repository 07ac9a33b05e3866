"""Yes/No/Unclear classification of confirmation replies, and cancel matching."""

import re
from collections.abc import Iterable
from enum import Enum


class Confirmation(str, Enum):
    """Three-way result of a confirmation reply."""

    yes = "yes"
    no = "no"
    unclear = "unclear"


def _compile(phrase: str) -> re.Pattern[str]:
    folded = phrase.casefold()
    # Short ASCII words like "y" or "no" must not fire inside other words
    if folded.isascii() and folded.isalnum():
        return re.compile(rf"(?<![a-z0-9]){re.escape(folded)}(?![a-z0-9])")
    return re.compile(re.escape(folded))


class ConfirmationClassifier:
    """Classify a reply against positive and negative phrase lists.

    Rules, in order:
    1. The whole reply equals a phrase from exactly one list -> that side.
    2. Phrases from exactly one list occur in the reply -> that side.
    3. Phrases from both lists occur (or from neither) -> unclear.
    """

    def __init__(self, positive: Iterable[str], negative: Iterable[str]) -> None:
        self._positive = {p.casefold() for p in positive if p}
        self._negative = {p.casefold() for p in negative if p}
        self._positive_patterns = [_compile(p) for p in self._positive]
        self._negative_patterns = [_compile(p) for p in self._negative]

    def classify(self, text: str) -> Confirmation:
        reply = (text or "").strip().casefold()
        if not reply:
            return Confirmation.unclear

        exact_yes = reply in self._positive
        exact_no = reply in self._negative
        if exact_yes != exact_no:
            return Confirmation.yes if exact_yes else Confirmation.no

        has_yes = any(p.search(reply) for p in self._positive_patterns)
        has_no = any(p.search(reply) for p in self._negative_patterns)

        if has_yes and not has_no:
            return Confirmation.yes
        if has_no and not has_yes:
            return Confirmation.no
        return Confirmation.unclear


class CancelMatcher:
    """Exact (trimmed, case-folded) match against cancellation phrases.

    Substrings do not count, so free text such as an inquiry body that merely
    mentions a cancel word is not treated as a cancellation.
    """

    def __init__(self, phrases: Iterable[str]) -> None:
        self._phrases = {p.strip().casefold() for p in phrases if p.strip()}

    def matches(self, text: str) -> bool:
        return (text or "").strip().casefold() in self._phrases
