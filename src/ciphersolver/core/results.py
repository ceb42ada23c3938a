from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ciphersolver.classical.common import Key


@dataclass(frozen=True, order=True)
class SolveResult:
    # sort_index comes first so dataclass ordering uses it automatically
    sort_index: tuple[float, int] = field(init=False, repr=False)

    cipher_name: str
    plaintext: str
    key: Optional[str] = None

    # Lower is better (distance to the reference text)
    score: float = 0.0

    # For transparency / debugging (why this was chosen)
    notes: str = ""

    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        # Ascending score; longer plaintext as a stable, weak tie-break.
        object.__setattr__(self, "sort_index", (self.score, -len(self.plaintext)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "cipher_name": self.cipher_name,
            "plaintext": self.plaintext,
            "key": self.key,
            "score": self.score,
            "notes": self.notes,
            "meta": dict(self.meta),
        }


@dataclass(frozen=True)
class SearchResult:
    """Terminal state of one key search: the best key seen, not the last one."""

    key: "Key"
    score: float
    plaintext: str
    iterations: int
    accepted: int
    elapsed: float
    stop_reason: str
    seed: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key.targets,
            "pairs": [list(p) for p in self.key.pairs],
            "score": self.score,
            "plaintext": self.plaintext,
            "iterations": self.iterations,
            "accepted": self.accepted,
            "elapsed": self.elapsed,
            "stop_reason": self.stop_reason,
            "seed": self.seed,
        }


@dataclass(frozen=True)
class TextFeatures:
    length: int
    letters: int
    unique_letters: int
    ioc: float  # index of coincidence for A-Z only (0 if not applicable)
    entropy: float
    most_common: str
    reference_distance: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "letters": self.letters,
            "unique_letters": self.unique_letters,
            "ioc": self.ioc,
            "entropy": self.entropy,
            "most_common": self.most_common,
            "reference_distance": self.reference_distance,
        }
