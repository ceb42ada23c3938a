from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ciphersolver.core.errors import InvalidKeyError
from ciphersolver.core.utils import ALPHABET


def alphabet() -> tuple[str, ...]:
    return tuple(ALPHABET)


_SYMBOLS = frozenset(ALPHABET)


def _check_permutation(symbols, what: str) -> None:
    seen = set()
    for s in symbols:
        if s not in _SYMBOLS:
            raise InvalidKeyError(f"Key {what} '{s}' is not in A-Z.")
        if s in seen:
            raise InvalidKeyError(f"Key {what} '{s}' appears more than once.")
        seen.add(s)
    missing = [c for c in ALPHABET if c not in seen]
    if missing:
        raise InvalidKeyError(f"Key is missing {what}(s): {''.join(missing)}.")


@dataclass(frozen=True)
class Key:
    """
    One-to-one replacement key: a (source, target) pair for every letter.

    Pairs are stored ordered by source, so two keys describing the same
    permutation compare equal. Keys are values: every change makes a new one.
    """

    pairs: Tuple[Tuple[str, str], ...]

    def __post_init__(self) -> None:
        pairs = tuple((str(s), str(t)) for s, t in self.pairs)
        if len(pairs) != len(ALPHABET):
            raise InvalidKeyError(f"Key needs exactly {len(ALPHABET)} pairs, got {len(pairs)}.")
        _check_permutation([s for s, _ in pairs], "source")
        _check_permutation([t for _, t in pairs], "target")
        object.__setattr__(self, "pairs", tuple(sorted(pairs)))

    @classmethod
    def from_targets(cls, targets: str) -> "Key":
        """Key mapping ALPHABET[i] -> targets[i]."""
        if len(targets) != 26:
            raise InvalidKeyError(f"Expected 26 target letters, got {len(targets)}.")
        return cls(tuple(zip(ALPHABET, targets.upper())))

    @classmethod
    def from_mapping(cls, mapping: Dict[str, str]) -> "Key":
        return cls(tuple(mapping.items()))

    @property
    def mapping(self) -> Dict[str, str]:
        return dict(self.pairs)

    @property
    def targets(self) -> str:
        return "".join(t for _, t in self.pairs)

    def invert(self) -> "Key":
        return Key(tuple((t, s) for s, t in self.pairs))

    def swap(self, a: str, b: str) -> "Key":
        """New key where sources a and b exchange their targets."""
        m = self.mapping
        m[a], m[b] = m[b], m[a]
        return Key.from_mapping(m)

    def differences(self, other: "Key") -> list[str]:
        """Sources whose targets differ between the two keys."""
        theirs = other.mapping
        return [s for s, t in self.pairs if theirs[s] != t]

    def __str__(self) -> str:
        return self.targets


def random_key(rng: Optional[random.Random] = None) -> Key:
    # shuffle alphabet to get replacements for each character
    rng = rng or random.Random()
    replacements = list(ALPHABET)
    rng.shuffle(replacements)
    return Key(tuple(zip(ALPHABET, replacements)))


def invert(key: Key) -> Key:
    return key.invert()


def shift_key(shift: int) -> Key:
    """Caesar key: each letter maps to the one `shift` places later (mod 26)."""
    k = shift % 26
    return Key.from_targets(ALPHABET[k:] + ALPHABET[:k])


def tweak(key: Key, rng: Optional[random.Random] = None) -> Key:
    """Swap the targets of two distinct, randomly chosen sources."""
    rng = rng or random.Random()
    a, b = rng.sample(ALPHABET, 2)
    return key.swap(a, b)


def parse_key(key: str) -> Key:
    """
    Accept either:
      1) 26-letter string: A->key[0], B->key[1], ... (the encryption alphabet)
      2) pair mapping like "A:Q,B:W,..." covering all 26 letters
    """
    k = key.strip().upper()

    only_letters = "".join(ch for ch in k if ch in ALPHABET)
    if ":" not in k:
        if len(only_letters) != 26:
            raise InvalidKeyError("Key must be 26 letters or 'A:Q,B:W,...' pairs.")
        return Key.from_targets(only_letters)

    mapping: Dict[str, str] = {}
    items = [x.strip() for x in k.split(",") if x.strip()]
    for item in items:
        if ":" not in item:
            raise InvalidKeyError("Pair mapping must look like 'A:Q,B:W,...'")
        src, dst = [p.strip() for p in item.split(":", 1)]
        if len(src) != 1 or len(dst) != 1 or src not in ALPHABET or dst not in ALPHABET:
            raise InvalidKeyError(f"Bad pair '{item}'. Use single letters like 'A:Q'.")
        if src in mapping:
            raise InvalidKeyError(f"Letter '{src}' is mapped twice.")
        mapping[src] = dst
    return Key.from_mapping(mapping)


# ----------------------------
# Cipher engine
# ----------------------------

def normalize(text: str) -> str:
    return text.upper()


def apply_key(text: str, key: Key) -> str:
    """Replace each A-Z letter by its image; everything else is left in place."""
    table = str.maketrans(key.mapping)
    return normalize(text).translate(table)


def encrypt(text: str, key: Key) -> str:
    return apply_key(text, key)


def decrypt(text: str, key: Key) -> str:
    return apply_key(text, key.invert())


def caesar_encrypt(text: str, shift: int) -> str:
    return apply_key(text, shift_key(shift))


def caesar_decrypt(text: str, shift: int) -> str:
    return caesar_encrypt(text, -shift)
