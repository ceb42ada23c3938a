from __future__ import annotations

import re
from collections import Counter
from importlib import resources
from typing import Iterable, Mapping, Optional, Protocol

from ciphersolver.core.errors import EmptyInputError
from ciphersolver.core.ngrams import NgramProfile
from ciphersolver.core.utils import ALPHABET, normalize_az


# ----------------------------
# Reference corpus (cached)
# ----------------------------

_REFERENCE_TEXT: str | None = None


def reference_text() -> str:
    """Bundled reference corpus from ciphersolver.data/hamlet.txt."""
    global _REFERENCE_TEXT
    if _REFERENCE_TEXT is None:
        _REFERENCE_TEXT = resources.files("ciphersolver.data").joinpath("hamlet.txt").read_text(
            encoding="utf-8"
        )
    return _REFERENCE_TEXT


# ----------------------------
# Character frequency profiles
# ----------------------------

def profile(text: str) -> dict[str, int]:
    """Occurrences of each letter A-Z; other characters are ignored."""
    counts = Counter(normalize_az(text))
    return {ch: counts.get(ch, 0) for ch in ALPHABET}


def percentages(prof: Mapping[str, float]) -> dict[str, float]:
    total = sum(prof.values())
    if total <= 0:
        raise EmptyInputError("Cannot take percentages of a text without letters.")
    return {ch: 100.0 * prof.get(ch, 0) / total for ch in ALPHABET}


def frequency_distance(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """
    Sum of absolute per-letter differences, divided by the combined total.

    0.0 means identical profiles, 1.0 means the profiles share no letter.
    """
    norm = sum(a.values()) + sum(b.values())
    if norm <= 0:
        raise EmptyInputError("Frequency distance is undefined for two empty profiles.")
    diff = sum(abs(a.get(ch, 0) - b.get(ch, 0)) for ch in ALPHABET)
    return diff / norm


# ----------------------------
# Metrics
# ----------------------------

class Metric(Protocol):
    """Maps decrypted candidate text to a non-negative badness score."""

    def __call__(self, text: str) -> float:
        ...


class FrequencyMetric:
    name = "frequency"

    def __init__(self, reference: str, *, relative: bool = True) -> None:
        self.relative = relative
        ref = profile(reference)
        if sum(ref.values()) == 0:
            raise EmptyInputError("Reference text has no letters.")
        self._reference = percentages(ref) if relative else ref

    def __call__(self, text: str) -> float:
        prof = profile(text)
        if self.relative:
            prof = percentages(prof)
        return frequency_distance(prof, self._reference)


class BigramMetric:
    name = "bigram"

    def __init__(self, reference: str) -> None:
        self._reference = NgramProfile.from_text(reference, 2)
        if self._reference.total == 0:
            raise EmptyInputError("Reference text has no letter bigrams.")

    def __call__(self, text: str) -> float:
        cand = NgramProfile.from_text(text, 2)
        if cand.total == 0:
            # a single letter has no bigrams: nothing in common with the reference
            return 1.0
        return cand.distance(self._reference)


_WORD_RE = re.compile(r"[A-Z]+")


def _extract_words(text: str) -> list[str]:
    words = _WORD_RE.findall(text.upper())
    return [w for w in words if len(w) >= 2 or w in ("A", "I")]


class WordMetric:
    """Share of candidate words missing from the reference vocabulary."""

    name = "words"

    def __init__(self, reference: str) -> None:
        self._vocabulary = frozenset(_extract_words(reference))
        if not self._vocabulary:
            raise EmptyInputError("Reference text has no words.")

    def __call__(self, text: str) -> float:
        words = _extract_words(text)
        if not words:
            return 1.0
        hits = sum(1 for w in words if w in self._vocabulary)
        return 1.0 - hits / len(words)


class MetricSet:
    """Ordered collection of metrics; total fitness is their sum (lower is better)."""

    def __init__(self, metrics: Iterable[Metric]) -> None:
        self.metrics = tuple(metrics)
        if not self.metrics:
            raise ValueError("A metric set needs at least one metric.")

    def total_fitness(self, text: str) -> float:
        return sum(metric(text) for metric in self.metrics)

    __call__ = total_fitness

    def with_metric(self, metric: Metric) -> "MetricSet":
        return MetricSet(self.metrics + (metric,))

    def names(self) -> list[str]:
        return [getattr(m, "name", getattr(m, "__name__", type(m).__name__)) for m in self.metrics]

    def __len__(self) -> int:
        return len(self.metrics)


def build_metrics(
    reference: Optional[str] = None,
    *,
    bigrams: bool = False,
    words: bool = False,
    relative: bool = True,
) -> MetricSet:
    ref = reference_text() if reference is None else reference
    metrics: list[Metric] = [FrequencyMetric(ref, relative=relative)]
    if bigrams:
        metrics.append(BigramMetric(ref))
    if words:
        metrics.append(WordMetric(ref))
    return MetricSet(metrics)


def default_metrics(reference: Optional[str] = None) -> MetricSet:
    return build_metrics(reference)
