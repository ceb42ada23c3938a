from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ciphersolver.core.utils import normalize_az

from .results import SolveResult
from .scoring import MetricSet, default_metrics

logger = logging.getLogger(__name__)


class CipherPlugin(Protocol):
    name: str

    def encrypt(self, plaintext: str, key: str) -> str:
        ...

    def decrypt(self, ciphertext: str, key: str) -> str:
        ...

    def crack(self, ciphertext: str, metrics: MetricSet) -> list[SolveResult]:
        ...


@dataclass
class _PluginEntry:
    plugin: CipherPlugin
    should_try: Optional[Callable[[str], bool]] = None


_PLUGINS: dict[str, _PluginEntry] = {}


def register_plugin(plugin: CipherPlugin, *, should_try: Optional[Callable[[str], bool]] = None) -> None:
    key = plugin.name.lower().strip()
    if not key:
        raise ValueError("Plugin must have a non-empty name.")
    _PLUGINS[key] = _PluginEntry(plugin=plugin, should_try=should_try)


def list_plugins() -> list[str]:
    return sorted(_PLUGINS.keys())


def get_plugin(cipher_name: str) -> CipherPlugin:
    name = cipher_name.lower().strip()
    if name not in _PLUGINS:
        raise ValueError(f"Unknown cipher '{cipher_name}'. Available: {', '.join(list_plugins())}")
    return _PLUGINS[name].plugin


def encrypt_known(cipher_name: str, plaintext: str, key: Optional[str]) -> str:
    if key is None:
        raise ValueError("This encrypt operation requires --key.")
    return get_plugin(cipher_name).encrypt(plaintext, key)


def decrypt_known(cipher_name: str, ciphertext: str, key: Optional[str]) -> str:
    if key is None:
        raise ValueError("This decrypt operation requires --key.")
    return get_plugin(cipher_name).decrypt(ciphertext, key)


def _dedupe_by_plaintext(results: list[SolveResult]) -> list[SolveResult]:
    """
    Deduplicate candidates that decrypt to the same plaintext (A-Z normalized).
    Keep the lowest score; on a tie keep the one seen first.
    """
    best: dict[str, SolveResult] = {}
    for r in results:
        fp = normalize_az(r.plaintext or "")
        if not fp:
            continue
        cur = best.get(fp)
        if cur is None or r.score < cur.score:
            best[fp] = r
    return list(best.values())


def crack_unknown(
    ciphertext: str,
    *,
    top_n: int = 5,
    include: set[str] | None = None,
    metrics: MetricSet | None = None,
) -> list[SolveResult]:
    """
    Ask registered plugins to attempt cracking, all scored by the same metrics.

    If include is None (auto mode), plugins may be skipped by their should_try
    gate and a failing plugin is logged and skipped. Explicitly requested
    plugins always run and their errors propagate.
    """
    metrics = metrics or default_metrics()
    results: list[SolveResult] = []

    for name, entry in _PLUGINS.items():
        if include is not None and name not in include:
            continue

        if include is None and entry.should_try is not None and not entry.should_try(ciphertext):
            logger.debug("Skipping %s: input does not look like a candidate", name)
            continue

        try:
            results.extend(entry.plugin.crack(ciphertext, metrics))
        except ValueError as e:
            if include is not None:
                raise
            logger.warning("Plugin %s failed: %s", name, e)

    ranked = _dedupe_by_plaintext(results)
    ranked.sort()
    return ranked[:top_n]
