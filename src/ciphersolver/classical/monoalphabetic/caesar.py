from __future__ import annotations

from typing import Optional

from ciphersolver.classical.common import caesar_encrypt, decrypt, shift_key
from ciphersolver.core.errors import EmptyInputError
from ciphersolver.core.features import alpha_ratio
from ciphersolver.core.registry import register_plugin
from ciphersolver.core.results import SolveResult
from ciphersolver.core.scoring import MetricSet, default_metrics
from ciphersolver.core.utils import normalize_az


def _should_try(text: str) -> bool:
    # Caesar is primarily alphabetic; allow some punctuation/spaces.
    return alpha_ratio(text) >= 0.60 and len(normalize_az(text)) >= 4


def _parse_shift(key: str) -> int:
    try:
        return int(key) % 26
    except ValueError as e:
        raise ValueError("Caesar key must be an integer 0..25.") from e


def score_shifts(ciphertext: str, metrics: Optional[MetricSet] = None) -> list[tuple[int, float]]:
    """Score every one of the 26 shifts; index i holds shift i."""
    if not normalize_az(ciphertext):
        raise EmptyInputError("Ciphertext contains no letters A-Z.")
    metrics = metrics or default_metrics()
    return [(k, metrics.total_fitness(decrypt(ciphertext, shift_key(k)))) for k in range(26)]


def best_shift(ciphertext: str, metrics: Optional[MetricSet] = None) -> tuple[int, float]:
    """
    Exhaustive Caesar solver: the shift whose decryption scores lowest.
    Ties go to the smallest shift.
    """
    return min(score_shifts(ciphertext, metrics), key=lambda ks: ks[1])


class CaesarCipher:
    name = "caesar"

    def encrypt(self, plaintext: str, key: str) -> str:
        return caesar_encrypt(plaintext, _parse_shift(key))

    def decrypt(self, ciphertext: str, key: str) -> str:
        # Decrypt means shift backwards by k
        return decrypt(ciphertext, shift_key(_parse_shift(key)))

    def crack(self, ciphertext: str, metrics: MetricSet) -> list[SolveResult]:
        out: list[SolveResult] = []
        for k, score in score_shifts(ciphertext, metrics):
            out.append(
                SolveResult(
                    cipher_name=self.name,
                    plaintext=decrypt(ciphertext, shift_key(k)),
                    key=str(k),
                    score=score,
                    notes=f"Caesar shift {k}",
                )
            )
        return out


register_plugin(CaesarCipher(), should_try=_should_try)
