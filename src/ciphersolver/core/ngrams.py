from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ciphersolver.core.errors import EmptyInputError
from ciphersolver.core.utils import normalize_az


def ngram_counts(text: str, n: int) -> Counter:
    """Counts of overlapping n-grams over the letters-only stream."""
    if n < 1:
        raise ValueError("n-gram size must be >= 1.")
    s = normalize_az(text)
    return Counter(s[i:i + n] for i in range(len(s) - n + 1))


@dataclass(frozen=True)
class NgramProfile:
    n: int
    counts: Counter
    total: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total", sum(self.counts.values()))

    @classmethod
    def from_text(cls, text: str, n: int = 2) -> "NgramProfile":
        return cls(n=n, counts=ngram_counts(text, n))

    def relative(self) -> dict[str, float]:
        if self.total == 0:
            raise EmptyInputError(f"No {self.n}-grams to take frequencies of.")
        return {g: c / self.total for g, c in self.counts.items()}

    def distance(self, other: "NgramProfile") -> float:
        """
        Half the L1 distance between relative n-gram frequencies, in [0, 1].
        0 means identical distributions; 1 means no n-gram in common.
        """
        if self.n != other.n:
            raise ValueError(f"Cannot compare {self.n}-grams with {other.n}-grams.")
        a = self.relative()
        b = other.relative()
        total = 0.0
        for g in a.keys() | b.keys():
            total += abs(a.get(g, 0.0) - b.get(g, 0.0))
        return total / 2.0
