import pytest

from ciphersolver.core.errors import EmptyInputError
from ciphersolver.core.features import analyze_text
from ciphersolver.core.registry import crack_unknown, decrypt_known, encrypt_known, list_plugins
from ciphersolver.core.results import SolveResult
from ciphersolver.core.scoring import reference_text

QUOTE_CT = "WR EH RU QRW WR EH, WKDW LV WKH TXHVWLRQ."
QUOTE_PT = "TO BE OR NOT TO BE, THAT IS THE QUESTION."


def test_plugins_are_registered():
    assert list_plugins() == ["caesar", "substitution"]


def test_known_key_dispatch(secret_key, hamlet_quote):
    assert encrypt_known("Caesar", hamlet_quote, "3") == QUOTE_CT
    assert decrypt_known("caesar", QUOTE_CT, "3") == QUOTE_PT
    ct = encrypt_known("substitution", hamlet_quote, secret_key.targets)
    assert decrypt_known("substitution", ct, secret_key.targets) == QUOTE_PT


def test_unknown_cipher_and_missing_key():
    with pytest.raises(ValueError):
        decrypt_known("vigenere", QUOTE_CT, "KEY")
    with pytest.raises(ValueError):
        decrypt_known("caesar", QUOTE_CT, None)
    with pytest.raises(ValueError):
        encrypt_known("caesar", QUOTE_CT, None)


def test_crack_explicit_caesar():
    results = crack_unknown(QUOTE_CT, include={"caesar"})
    assert results[0].plaintext == QUOTE_PT
    assert results[0].key == "3"
    assert [r.score for r in results] == sorted(r.score for r in results)


def test_crack_auto_mode_skips_substitution_for_short_text():
    # 30 letters is below the substitution plugin's threshold
    results = crack_unknown(QUOTE_CT, top_n=26)
    assert {r.cipher_name for r in results} == {"caesar"}
    assert results[0].key == "3"


def test_crack_explicit_errors_propagate():
    with pytest.raises(EmptyInputError):
        crack_unknown("1234", include={"caesar"})


def test_crack_auto_mode_without_candidates():
    assert crack_unknown("1234") == []


def test_dedupe_keeps_one_candidate_per_plaintext():
    # every shift gives a different plaintext, so nothing collapses
    results = crack_unknown(QUOTE_CT, top_n=100, include={"caesar"})
    assert len({r.plaintext for r in results}) == len(results) == 26


def test_solve_result_ordering():
    worse = SolveResult(cipher_name="caesar", plaintext="ABC", score=0.9)
    better = SolveResult(cipher_name="caesar", plaintext="XYZ", score=0.1)
    assert sorted([worse, better]) == [better, worse]
    assert better.to_dict()["score"] == 0.1


def test_analyze_text():
    info = analyze_text("Hello, World!", reference_text())
    assert info["letters"] == 10
    assert info["unique_letters"] == 7
    assert info["most_common"][0] == "L"
    assert 0.0 < info["reference_distance"] < 1.0
    assert analyze_text("123")["reference_distance"] is None
