"""
Runtime configuration for partial_offers.

Defines OfferSettings, a frozen dataclass carrying the settings that are not part of an offer's
terms: where the asset-maker templates come from, how hard bundles are compressed, and how
chatty logging is.

Precedence
- environment (PARTIAL_OFFERS_*) > TOML > defaults.
- TOML search order: ./partial_offers.toml ([offers] table or top-level keys), then
  ./pyproject.toml under [tool.partial_offers].

Import DAG discipline
- Depends only on stdlib.
- partial_offers.core.puzzles imports this module lazily when the puzzle set is first needed.

Notes
- Invalid values are ignored in favor of the lower-precedence value.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

__all__ = [
    "OfferSettings",
    "configure_logging",
]

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class OfferSettings:
    """
    Runtime settings for partial offers.

    Attributes:
        puzzle_manifest (str | None): Path to the JSON puzzle manifest supplying the asset-maker
            templates. None leaves the puzzle set with the built-in templates only.
        compression_level (int): zlib level used by `compress` (0..9).
        log_level (str): Level applied to the `partial_offers` logger by `configure_logging`.

    Examples:
        >>> from partial_offers.config import OfferSettings
        >>> OfferSettings(compression_level=6)  # doctest: +ELLIPSIS
        OfferSettings(...)
    """

    puzzle_manifest: str | None = None
    compression_level: int = 9
    log_level: str = "WARNING"

    @classmethod
    def _apply_mapping(cls, base: OfferSettings, cfg: dict[str, Any] | None) -> OfferSettings:
        """Apply a loose config mapping onto OfferSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        # puzzle_manifest
        if "puzzle_manifest" in cfg and isinstance(cfg["puzzle_manifest"], str):
            s = replace(s, puzzle_manifest=cfg["puzzle_manifest"])

        # compression_level (0..9)
        if "compression_level" in cfg:
            try:
                level = int(cfg["compression_level"])
            except (TypeError, ValueError):
                level = None
            if level is not None and 0 <= level <= 9:
                s = replace(s, compression_level=level)

        # log_level
        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            lvl = cfg["log_level"].strip().upper()
            if lvl in _LOG_LEVELS:
                s = replace(s, log_level=lvl)

        return s

    @classmethod
    def from_env(
        cls, base: OfferSettings | None = None, prefix: str = "PARTIAL_OFFERS_"
    ) -> OfferSettings:
        """
        Build OfferSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - PARTIAL_OFFERS_PUZZLE_MANIFEST
            - PARTIAL_OFFERS_COMPRESSION_LEVEL
            - PARTIAL_OFFERS_LOG_LEVEL
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("puzzle_manifest", "compression_level", "log_level"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> OfferSettings:
        """
        Build OfferSettings from a TOML file.

        Search order when `path` is None:
            1) ./partial_offers.toml (with either an [offers] table or direct keys)
            2) ./pyproject.toml under [tool.partial_offers]

        Returns defaults if no file is present or none carries settings.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "partial_offers.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("partial_offers") if isinstance(tool, dict) else None
            elif isinstance(data.get("offers"), dict):
                cfg = data["offers"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> OfferSettings:
        """
        Load OfferSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (partial_offers.toml, pyproject.toml).

        Returns:
            OfferSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s


def configure_logging(settings: OfferSettings | None = None) -> logging.Logger:
    """
    Apply `settings.log_level` to the `partial_offers` logger (the root logger is untouched).

    Returns:
        logging.Logger: The package logger.
    """
    settings = settings or OfferSettings.load()
    logger = logging.getLogger("partial_offers")
    logger.setLevel(settings.log_level)
    return logger
