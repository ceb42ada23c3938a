from __future__ import annotations

import enum
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Optional

from ciphersolver.classical.common import Key, decrypt, encrypt, parse_key, random_key, tweak
from ciphersolver.core.errors import EmptyInputError
from ciphersolver.core.features import alpha_ratio
from ciphersolver.core.registry import register_plugin
from ciphersolver.core.results import SearchResult, SolveResult
from ciphersolver.core.scoring import MetricSet, default_metrics
from ciphersolver.core.utils import normalize_az

logger = logging.getLogger(__name__)

SCHEDULES = ("fixed", "linear")


@dataclass(frozen=True)
class SearchConfig:
    """
    Knobs for one key search.

    acceptance_probability: chance of taking a proposal that is not strictly
        better than the current key.
    schedule: "fixed" keeps that chance constant; "linear" lowers it to 0 over
        max_iterations.
    max_iterations / max_seconds / patience: stop after this many proposals,
        this much wall-clock time, or this many proposals without a new best.
        Whichever is reached first ends the search.
    """

    acceptance_probability: float = 0.1
    max_iterations: Optional[int] = 10000
    max_seconds: Optional[float] = None
    patience: Optional[int] = None
    seed: Optional[int] = None
    schedule: str = "fixed"

    def __post_init__(self) -> None:
        if not 0.0 <= self.acceptance_probability <= 1.0:
            raise ValueError("acceptance_probability must be between 0 and 1.")
        if self.schedule not in SCHEDULES:
            raise ValueError(f"Unknown schedule '{self.schedule}'. Use one of: {', '.join(SCHEDULES)}.")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1.")
        if self.max_seconds is not None and self.max_seconds <= 0:
            raise ValueError("max_seconds must be > 0.")
        if self.patience is not None and self.patience < 1:
            raise ValueError("patience must be >= 1.")
        if self.max_iterations is None and self.max_seconds is None and self.patience is None:
            raise ValueError("Set at least one of max_iterations, max_seconds or patience.")
        if self.schedule == "linear" and self.max_iterations is None:
            raise ValueError("The linear schedule needs max_iterations.")


class SearchState(enum.Enum):
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    TERMINATED = "terminated"


class KeySearch:
    """
    Stochastic local search over substitution keys.

    The current key is replaced, never mutated: each step proposes a tweaked
    copy, scores its decryption and either adopts it or keeps the old one.
    The best key seen so far is tracked separately from the current key.
    """

    def __init__(
        self,
        ciphertext: str,
        metrics: Optional[MetricSet] = None,
        config: Optional[SearchConfig] = None,
    ) -> None:
        if not normalize_az(ciphertext):
            raise EmptyInputError("Ciphertext contains no letters A-Z.")

        self.ciphertext = ciphertext
        self.metrics = metrics or default_metrics()
        self.config = config or SearchConfig()
        self.rng = random.Random(self.config.seed)
        self.state = SearchState.INITIALIZING

        self.iterations = 0
        self.accepted = 0
        self.stop_reason: Optional[str] = None

        self.current_key = random_key(self.rng)
        self.current_score = self.score(self.current_key)
        self.best_key = self.current_key
        self.best_score = self.current_score
        self._best_at = 0
        self._start = time.perf_counter()

    def score(self, key: Key) -> float:
        return self.metrics.total_fitness(decrypt(self.ciphertext, key))

    def acceptance_probability(self) -> float:
        p = self.config.acceptance_probability
        if self.config.schedule == "linear":
            p *= 1.0 - self.iterations / self.config.max_iterations
        return max(0.0, p)

    def elapsed(self) -> float:
        return time.perf_counter() - self._start

    def _stop_reason(self) -> Optional[str]:
        cfg = self.config
        if cfg.max_iterations is not None and self.iterations >= cfg.max_iterations:
            return "iterations"
        if cfg.max_seconds is not None and self.elapsed() >= cfg.max_seconds:
            return "time"
        if cfg.patience is not None and self.iterations - self._best_at >= cfg.patience:
            return "patience"
        return None

    def step(self) -> bool:
        """One proposal. Returns True when the candidate became the current key."""
        if self.state is SearchState.TERMINATED:
            raise RuntimeError("Search has already terminated.")
        self.state = SearchState.ITERATING

        candidate = tweak(self.current_key, self.rng)
        candidate_score = self.score(candidate)
        p = self.acceptance_probability()
        self.iterations += 1

        if candidate_score < self.current_score or self.rng.random() < p:
            self.current_key, self.current_score = candidate, candidate_score
            self.accepted += 1
            if candidate_score < self.best_score:
                self.best_key, self.best_score = candidate, candidate_score
                self._best_at = self.iterations
                logger.debug("iteration %d: new best %.5f key=%s", self.iterations, candidate_score, candidate)
            return True
        return False

    def run(self) -> SearchResult:
        while self.state is not SearchState.TERMINATED:
            reason = self._stop_reason()
            if reason is not None:
                self.stop_reason = reason
                self.state = SearchState.TERMINATED
                break
            self.step()

        result = self.result()
        logger.info(
            "search finished (%s) after %d iterations in %.2fs: best score %.5f",
            result.stop_reason,
            result.iterations,
            result.elapsed,
            result.score,
        )
        return result

    def result(self) -> SearchResult:
        return SearchResult(
            key=self.best_key,
            score=self.best_score,
            plaintext=decrypt(self.ciphertext, self.best_key),
            iterations=self.iterations,
            accepted=self.accepted,
            elapsed=self.elapsed(),
            stop_reason=self.stop_reason or "running",
            seed=self.config.seed,
        )


def solve_substitution(
    ciphertext: str,
    metrics: Optional[MetricSet] = None,
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    return KeySearch(ciphertext, metrics, config).run()


def solve_parallel(
    ciphertext: str,
    metrics: Optional[MetricSet] = None,
    config: Optional[SearchConfig] = None,
    workers: int = 4,
) -> SearchResult:
    """
    Run `workers` independent searches (seeds seed, seed+1, ...) and return the
    lowest-scoring result. Blocks until every search has finished.
    """
    if workers < 1:
        raise ValueError("workers must be >= 1.")
    if not normalize_az(ciphertext):
        raise EmptyInputError("Ciphertext contains no letters A-Z.")

    config = config or SearchConfig()
    metrics = metrics or default_metrics()
    base = config.seed if config.seed is not None else random.randrange(2**32)
    configs = [replace(config, seed=base + i) for i in range(workers)]

    if workers == 1:
        results = [solve_substitution(ciphertext, metrics, configs[0])]
    else:
        with ThreadPoolExecutor(max_workers=workers) as exe:
            futures = [exe.submit(solve_substitution, ciphertext, metrics, c) for c in configs]
            results = [f.result() for f in futures]

    best = min(results, key=lambda r: r.score)
    logger.info("best of %d searches: seed=%s score=%.5f", workers, best.seed, best.score)
    return best


# ----------------------------
# Plugin
# ----------------------------

def _should_try(text: str) -> bool:
    return alpha_ratio(text) >= 0.80 and len(normalize_az(text)) >= 60


class SubstitutionCipher:
    name = "substitution"

    def __init__(self, config: Optional[SearchConfig] = None, workers: int = 1) -> None:
        self.config = config or SearchConfig()
        self.workers = workers

    def encrypt(self, plaintext: str, key: str) -> str:
        return encrypt(plaintext, parse_key(key))

    def decrypt(self, ciphertext: str, key: str) -> str:
        return decrypt(ciphertext, parse_key(key))

    def crack(self, ciphertext: str, metrics: MetricSet) -> list[SolveResult]:
        found = solve_parallel(ciphertext, metrics, self.config, workers=self.workers)
        return [
            SolveResult(
                cipher_name=self.name,
                plaintext=found.plaintext,
                key=found.key.targets,
                score=found.score,
                notes=f"Key search with random swaps ({found.iterations} proposals, stopped on {found.stop_reason})",
                meta={"seed": found.seed, "accepted": found.accepted},
            )
        ]


register_plugin(SubstitutionCipher(), should_try=_should_try)
