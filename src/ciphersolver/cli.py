from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

import typer

from ciphersolver.classical import register_all
from ciphersolver.classical.common import random_key, shift_key
from ciphersolver.classical.monoalphabetic.substitution import SCHEDULES, SearchConfig, solve_parallel
from ciphersolver.core.features import analyze_text
from ciphersolver.core.registry import crack_unknown, decrypt_known, encrypt_known, list_plugins
from ciphersolver.core.scoring import build_metrics

app = typer.Typer(help="ciphersolver: break one-to-one replacement ciphers by key search.")


def _read_reference(path: Optional[Path]) -> Optional[str]:
    if path is None:
        return None
    return path.read_text(encoding="utf-8")


@app.callback()
def _init(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for progress, -vv for every new best key."),
):
    # Register plugins exactly once per CLI run
    register_all()
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def plugins():
    """List all registered cipher plugins."""
    for name in list_plugins():
        typer.echo(name)


@app.command()
def keygen(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for a reproducible key."),
    shift: Optional[int] = typer.Option(None, "--shift", help="Make a Caesar key with this shift instead."),
):
    """Print a key as the 26 letters that A..Z are replaced with."""
    key = shift_key(shift) if shift is not None else random_key(random.Random(seed))
    typer.echo(key.targets)


@app.command()
def encrypt(
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (caesar, substitution)."),
    key: str = typer.Option(..., "--key", "-k", help="Shift number or 26-letter key."),
    text: str = typer.Argument(..., help="Plaintext to encrypt."),
):
    """Encrypt with a known cipher and key."""
    try:
        ct = encrypt_known(cipher, text, key)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(ct)


@app.command()
def decrypt(
    cipher: str = typer.Option(..., "--cipher", "-c", help="Cipher plugin name (caesar, substitution)."),
    key: str = typer.Option(..., "--key", "-k", help="Shift number or 26-letter key used to encrypt."),
    text: str = typer.Argument(..., help="Ciphertext to decrypt."),
):
    """Decrypt when you already know the cipher type and have the key."""
    try:
        pt = decrypt_known(cipher, text, key)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    typer.echo(pt)


@app.command()
def analyze(
    text: str,
    reference: Optional[Path] = typer.Option(None, "--reference", "-r", exists=True, dir_okay=False),
):
    """Letter statistics of a text, and its distance to a reference text."""
    info = analyze_text(text, _read_reference(reference))
    for k, v in info.items():
        typer.echo(f"{k}: {v}")


@app.command()
def crack(
    text: str = typer.Argument(...),
    top: int = typer.Option(5, "--top", "-t"),
    cipher: Optional[List[str]] = typer.Option(
        None,
        "--cipher",
        "-c",
        help="Limit to specific plugin(s). Can repeat: -c caesar -c substitution",
    ),
    reference: Optional[Path] = typer.Option(None, "--reference", "-r", exists=True, dir_okay=False),
):
    """Try every registered cipher and rank the candidates."""
    include = {c.lower().strip() for c in cipher} if cipher else None

    # Validate filter names so it can't silently run the wrong thing
    if include is not None:
        available = set(list_plugins())
        unknown = sorted(include - available)
        if unknown:
            raise typer.BadParameter(
                f"Unknown cipher(s): {', '.join(unknown)}. Available: {', '.join(sorted(available))}"
            )

    try:
        metrics = build_metrics(_read_reference(reference))
        results = crack_unknown(text, top_n=top, include=include, metrics=metrics)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    if not results:
        typer.echo("No candidates produced. Input may be too short or not supported yet.")
        raise typer.Exit(code=0)

    for i, r in enumerate(results, start=1):
        typer.echo(f"#{i}  cipher={r.cipher_name}  score={r.score:.4f}  key={r.key}")
        if r.notes:
            typer.echo(f"    notes: {r.notes}")
        typer.echo(r.plaintext)
        typer.echo("-" * 60)


@app.command()
def solve(
    text: str = typer.Argument(..., help="Ciphertext of a one-to-one replacement cipher."),
    iterations: Optional[int] = typer.Option(10000, "--iterations", "-n", help="Proposal budget per search."),
    seconds: Optional[float] = typer.Option(None, "--seconds", help="Wall-clock budget per search."),
    patience: Optional[int] = typer.Option(None, "--patience", help="Stop after N proposals without a new best."),
    probability: float = typer.Option(0.1, "--probability", "-p", help="Chance of accepting a worse key."),
    schedule: str = typer.Option("fixed", "--schedule", help=f"Acceptance schedule: {', '.join(SCHEDULES)}."),
    seed: Optional[int] = typer.Option(None, "--seed", envvar="CIPHERSOLVER_SEED"),
    workers: int = typer.Option(1, "--workers", "-w", help="Independent searches; the best one wins."),
    reference: Optional[Path] = typer.Option(None, "--reference", "-r", exists=True, dir_okay=False),
    bigrams: bool = typer.Option(False, "--bigrams", help="Also score letter pairs."),
    words: bool = typer.Option(False, "--words", help="Also score words found in the reference."),
):
    """Search for the substitution key that makes the text look most like the reference."""
    try:
        config = SearchConfig(
            acceptance_probability=probability,
            max_iterations=iterations,
            max_seconds=seconds,
            patience=patience,
            seed=seed,
            schedule=schedule,
        )
        metrics = build_metrics(_read_reference(reference), bigrams=bigrams, words=words)
        result = solve_parallel(text, metrics, config, workers=workers)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    typer.echo(f"key={result.key.targets}  score={result.score:.5f}  iterations={result.iterations}")
    typer.echo(result.plaintext)


def main():
    app()


if __name__ == "__main__":
    main()
