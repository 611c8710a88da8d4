"""Configuration helpers for the function grapher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .tokens import LexMode


@dataclass(frozen=True)
class GrapherSettings:
    max_expression_length: int = 256
    lex_mode: LexMode = "strict"
    max_width: int = 4096
    max_height: int = 4096
    sample_workers: int = 1


def _positive_int(raw: object, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(float(raw))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return max(value, 1)


def load_settings(raw: Mapping[str, object] | None) -> GrapherSettings:
    """Build settings from the ``plugins.function_grapher`` config mapping.

    Missing or malformed values fall back to the defaults so a bad
    ``config.yml`` never breaks application start-up.
    """

    raw = raw or {}
    defaults = GrapherSettings()
    lex_mode = str(raw.get("lex_mode", defaults.lex_mode)).strip().lower()
    if lex_mode not in ("strict", "lenient"):
        lex_mode = defaults.lex_mode
    return GrapherSettings(
        max_expression_length=_positive_int(raw.get("max_expression_length"), defaults.max_expression_length),
        lex_mode=lex_mode,  # type: ignore[arg-type]
        max_width=_positive_int(raw.get("max_width"), defaults.max_width),
        max_height=_positive_int(raw.get("max_height"), defaults.max_height),
        sample_workers=_positive_int(raw.get("sample_workers"), defaults.sample_workers),
    )


__all__ = ["GrapherSettings", "load_settings"]
