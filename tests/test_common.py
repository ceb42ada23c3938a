import dataclasses
import random

import pytest

from ciphersolver.classical.common import (
    ALPHABET,
    Key,
    alphabet,
    apply_key,
    caesar_decrypt,
    caesar_encrypt,
    decrypt,
    encrypt,
    invert,
    parse_key,
    random_key,
    shift_key,
    tweak,
)
from ciphersolver.core.errors import InvalidKeyError


def assert_bijection(key):
    assert sorted(s for s, _ in key.pairs) == list(ALPHABET)
    assert sorted(t for _, t in key.pairs) == list(ALPHABET)


def test_alphabet_is_fixed():
    assert alphabet() == tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
    assert len(set(alphabet())) == 26


def test_random_keys_are_bijections(rng):
    for _ in range(50):
        assert_bijection(random_key(rng))


def test_random_key_is_reproducible_under_seed():
    assert random_key(random.Random(42)) == random_key(random.Random(42))
    assert random_key(random.Random(42)) != random_key(random.Random(43))


def test_shift_keys_are_bijections():
    for n in range(-30, 60):
        assert_bijection(shift_key(n))


def test_shift_key_maps_forward():
    assert shift_key(3).targets == "DEFGHIJKLMNOPQRSTUVWXYZABC"
    assert shift_key(0).targets == ALPHABET
    assert shift_key(26) == shift_key(0)


@pytest.mark.parametrize("n", [1, 3, 13, 25, 26, 27, 53])
def test_negative_shift_wraps(n):
    assert shift_key(-n) == shift_key(26 - (n % 26))


def test_tweak_swaps_exactly_two_targets(rng):
    key = random_key(rng)
    for _ in range(100):
        new = tweak(key, rng)
        assert_bijection(new)
        diff = key.differences(new)
        assert len(diff) == 2
        a, b = diff
        assert new.mapping[a] == key.mapping[b]
        assert new.mapping[b] == key.mapping[a]
        key = new


def test_keys_are_immutable(secret_key):
    before = secret_key.targets
    swapped = secret_key.swap("A", "B")
    assert secret_key.targets == before
    assert swapped.targets.startswith("WQ")
    with pytest.raises(dataclasses.FrozenInstanceError):
        secret_key.pairs = ()


def test_invert(secret_key):
    inv = invert(secret_key)
    assert inv.mapping["Q"] == "A"
    assert invert(inv) == secret_key
    assert_bijection(inv)


@pytest.mark.parametrize(
    "targets",
    [
        "A" * 26,
        "ABCDEFGHIJKLMNOPQRSTUVWXYA",
        "ABCDEFGHIJKLMNOPQRSTUVWXY",
        "ABCDEFGHIJKLMNOPQRSTUVWXY1",
    ],
)
def test_non_bijective_keys_are_rejected(targets):
    with pytest.raises(InvalidKeyError):
        Key.from_targets(targets)


def test_partial_key_is_rejected():
    with pytest.raises(InvalidKeyError):
        Key((("A", "B"), ("B", "A")))


@pytest.mark.parametrize("extra", [("AB", "CD"), ("", "")])
def test_extra_pair_is_rejected(extra):
    pairs = tuple(zip(ALPHABET, ALPHABET))
    with pytest.raises(InvalidKeyError):
        Key(pairs + (extra,))
    with pytest.raises(InvalidKeyError):
        Key.from_mapping({**dict(pairs), extra[0]: extra[1]})


@pytest.mark.parametrize("bad", ["AB", ""])
def test_multi_letter_symbols_are_rejected(bad):
    pairs = dict(zip(ALPHABET, ALPHABET))
    pairs["Z"] = bad
    with pytest.raises(InvalidKeyError):
        Key.from_mapping(pairs)


def test_invalid_key_error_is_value_error():
    assert issubclass(InvalidKeyError, ValueError)


def test_parse_key_letters_and_pairs(secret_key):
    assert parse_key("qwertyuiopasdfghjklzxcvbnm") == secret_key
    pairs = ",".join(f"{s}:{t}" for s, t in secret_key.pairs)
    assert parse_key(pairs) == secret_key


@pytest.mark.parametrize("bad", ["", "ABC", "A:B,C", "A:B,A:C", "AB:C"])
def test_parse_key_rejects_garbage(bad):
    with pytest.raises(InvalidKeyError):
        parse_key(bad)


def test_apply_key_passes_non_letters_through():
    assert apply_key("Hello, World! 123", shift_key(3)) == "KHOOR, ZRUOG! 123"


def test_round_trip_random_keys(rng, pride_text):
    for _ in range(20):
        key = random_key(rng)
        assert decrypt(encrypt(pride_text, key), key) == pride_text.upper()


def test_round_trip_shift_keys(hamlet_quote):
    for n in range(26):
        assert caesar_decrypt(caesar_encrypt(hamlet_quote, n), n) == hamlet_quote.upper()


def test_caesar_scenario(hamlet_quote):
    encrypted = "WR EH RU QRW WR EH, WKDW LV WKH TXHVWLRQ."
    assert caesar_encrypt(hamlet_quote, 3) == encrypted
    assert caesar_decrypt(encrypted, 3) == "TO BE OR NOT TO BE, THAT IS THE QUESTION."
    assert decrypt(encrypted, shift_key(3)) == "TO BE OR NOT TO BE, THAT IS THE QUESTION."
