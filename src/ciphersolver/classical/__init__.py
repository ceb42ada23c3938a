from __future__ import annotations

def register_all() -> None:
    from .monoalphabetic import caesar, substitution  # noqa: F401
