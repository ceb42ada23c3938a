from .errors import EmptyInputError, InvalidKeyError
from .results import SearchResult, SolveResult, TextFeatures
from .features import analyze_text
from .registry import register_plugin, decrypt_known, encrypt_known, crack_unknown
from .scoring import MetricSet, build_metrics, default_metrics

__all__ = [
    "EmptyInputError",
    "InvalidKeyError",
    "SearchResult",
    "SolveResult",
    "TextFeatures",
    "analyze_text",
    "register_plugin",
    "decrypt_known",
    "encrypt_known",
    "crack_unknown",
    "MetricSet",
    "build_metrics",
    "default_metrics",
]
