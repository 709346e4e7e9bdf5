"""
Script template registry: immutable template reveals paired with their golden hashes.

Every locking script an offer commits to is a template specialized with curried arguments.
Templates are versioned binary constants; each is verified against a known golden hash when it
enters the registry, and the registry is never mutated once installed.

Sources:
    - The partial offer template is embedded here.
    - The standard layers (settlement payments, token layer, revocation layer, one-of-many
      selector) ship with `chia_puzzles_py`.
    - Asset makers (native, default token, revocable token) come from a JSON puzzle manifest
      supplied by the deployment:

      {
        "version": 1,
        "templates": {
          "xch_asset_maker": {"reveal": "<hex>", "hash": "<hex>"},
          ...
        }
      }

Notes:
    - `puzzle_set()` loads the manifest named by `OfferSettings.puzzle_manifest` on first use and
      caches it for the life of the process; `install_puzzle_set()` replaces it explicitly.
      Without a manifest the set holds the built-in templates only.
    - An asset maker that was not supplied raises TemplateError when it is looked up; a golden
      hash mismatch raises TemplateError when the set is built.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from chia_puzzles_py import programs as standard
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import TemplateError
from .hashing import tree_hash
from .serde import Program, program_from_bytes

__all__ = [
    "ScriptTemplate",
    "PARTIAL_TEMPLATE",
    "STANDARD_TEMPLATES",
    "PARTIAL",
    "SETTLEMENT_PAYMENT",
    "CAT",
    "REVOCATION_LAYER",
    "P2_ONE_OF_MANY",
    "XCH_ASSET_MAKER",
    "DEFAULT_ASSET_MAKER",
    "REVOCABLE_ASSET_MAKER",
    "ASSET_MAKER_TEMPLATES",
    "MANIFEST_VERSION",
    "PuzzleManifest",
    "PuzzleSet",
    "load_puzzle_set",
    "puzzle_set",
    "install_puzzle_set",
]

logger = logging.getLogger(__name__)

PARTIAL = "partial"
SETTLEMENT_PAYMENT = "settlement_payment"
CAT = "cat"
REVOCATION_LAYER = "revocation_layer"
P2_ONE_OF_MANY = "p2_one_of_many"
XCH_ASSET_MAKER = "xch_asset_maker"
DEFAULT_ASSET_MAKER = "default_asset_maker"
REVOCABLE_ASSET_MAKER = "revocable_asset_maker"

ASSET_MAKER_TEMPLATES: tuple[str, ...] = (
    XCH_ASSET_MAKER,
    DEFAULT_ASSET_MAKER,
    REVOCABLE_ASSET_MAKER,
)

MANIFEST_VERSION = 1


@dataclass(frozen=True)
class ScriptTemplate:
    """
    One template reveal and the hash it must have.

    Attributes:
        name (str): Registry key.
        reveal (bytes): Serialized uncurried program.
        golden_hash (bytes): Expected 32-byte tree hash of `reveal`.
    """

    name: str
    reveal: bytes
    golden_hash: bytes

    def program(self) -> Program:
        return program_from_bytes(self.reveal)

    def verify(self) -> ScriptTemplate:
        """
        Check the reveal against its golden hash.

        Raises:
            TemplateError: If the reveal does not parse or hashes differently.
        """
        try:
            actual = tree_hash(self.program())
        except ValueError as exc:
            raise TemplateError(f"template {self.name!r} reveal does not parse") from exc
        if actual != self.golden_hash:
            raise TemplateError(
                f"template {self.name!r} hash mismatch: expected {self.golden_hash.hex()}, "
                f"got {actual.hex()}"
            )
        return self


PARTIAL_TEMPLATE = ScriptTemplate(
    name=PARTIAL,
    reveal=bytes.fromhex(
        "ff02ffff01ff04ffff04ff14ffff04ffff0bff0bffff02ff1effff04ff02ffff"
        "04ffff04ff82027fffff04ffff04ff17ffff04ffff02ffff03ffff15ff2fff82"
        "02ff80ffff01ff0880ffff018202ff80ff0180ffff04ffff04ff17ff8080ff80"
        "808080ff808080ff8080808080ff808080ffff04ffff04ff08ffff04ffff30ff"
        "82027fffff02ff05ffff04ff82057fff8207ff8080ff820b7f80ff808080ffff"
        "04ffff02ff16ffff04ff02ffff04ff82057fffff04ffff11ff820b7fffff05ff"
        "ff14ffff12ff8202ffff82013f80ff8201bf808080ff8080808080ffff03ff82"
        "05ffffff04ffff04ff1cff8205ff80ff5f80ff5f80808080ffff04ffff01ffff"
        "46ff3f33ff01ffff03ffff15ff0bff8080ffff04ff1cffff04ff05ffff04ff0b"
        "ffff04ffff04ff05ff8080ff8080808080ffff04ff0aff808080ff02ffff03ff"
        "ff07ff0580ffff01ff0bffff0102ffff02ff1effff04ff02ffff04ff09ff8080"
        "8080ffff02ff1effff04ff02ffff04ff0dff8080808080ffff01ff0bffff0101"
        "ff058080ff0180ff018080"
    ),
    golden_hash=bytes.fromhex("3f99548f5c089cfb1f2b8f8b04a63787b46a0700e74fc926528807fc996d8432"),
)

STANDARD_TEMPLATES: Mapping[str, ScriptTemplate] = MappingProxyType(
    {
        name: ScriptTemplate(name=name, reveal=bytes(reveal), golden_hash=bytes(golden))
        for name, reveal, golden in (
            (SETTLEMENT_PAYMENT, standard.SETTLEMENT_PAYMENT, standard.SETTLEMENT_PAYMENT_HASH),
            (CAT, standard.CAT_PUZZLE, standard.CAT_PUZZLE_HASH),
            (REVOCATION_LAYER, standard.REVOCATION_LAYER, standard.REVOCATION_LAYER_HASH),
            (P2_ONE_OF_MANY, standard.P2_1_OF_N, standard.P2_1_OF_N_HASH),
        )
    }
)


class _TemplateEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    reveal: str
    hash: str


class PuzzleManifest(BaseModel):
    """
    JSON puzzle manifest model.

    Attributes:
        version (int): Manifest schema version; must equal MANIFEST_VERSION.
        templates (dict[str, _TemplateEntry]): Hex reveal and hex golden hash per template name.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: int = MANIFEST_VERSION
    templates: dict[str, _TemplateEntry]

    def to_templates(self) -> dict[str, ScriptTemplate]:
        out: dict[str, ScriptTemplate] = {}
        for name, entry in self.templates.items():
            try:
                reveal = bytes.fromhex(entry.reveal)
                golden = bytes.fromhex(entry.hash)
            except ValueError as exc:
                raise TemplateError(f"template {name!r} is not valid hex") from exc
            out[name] = ScriptTemplate(name=name, reveal=reveal, golden_hash=golden)
        return out


@dataclass(frozen=True)
class PuzzleSet:
    """
    Verified, read-only collection of templates.

    Attributes:
        templates (Mapping[str, ScriptTemplate]): Templates by name, including the built-ins.
    """

    templates: Mapping[str, ScriptTemplate]

    @classmethod
    def from_templates(cls, templates: Mapping[str, ScriptTemplate] | None = None) -> PuzzleSet:
        """
        Verify `templates`, add the built-in templates, and freeze the result.

        Raises:
            TemplateError: On a hash mismatch or an attempt to replace a built-in template with
                different bytes.
        """
        builtin = {PARTIAL: PARTIAL_TEMPLATE, **STANDARD_TEMPLATES}
        merged: dict[str, ScriptTemplate] = {}
        for name, tmpl in (templates or {}).items():
            if name in builtin and tmpl.reveal != builtin[name].reveal:
                raise TemplateError(f"puzzle set overrides the built-in {name!r} template")
            merged[name] = tmpl.verify()
        for name, tmpl in builtin.items():
            merged[name] = tmpl.verify()
        return cls(templates=MappingProxyType(merged))

    def get(self, name: str) -> ScriptTemplate:
        try:
            return self.templates[name]
        except KeyError:
            if name in ASSET_MAKER_TEMPLATES:
                raise TemplateError(
                    f"template {name!r} is not installed; supply it in the puzzle manifest"
                ) from None
            raise TemplateError(f"unknown template {name!r}") from None

    def hash(self, name: str) -> bytes:
        return self.get(name).golden_hash

    def program(self, name: str) -> Program:
        return self.get(name).program()
def load_puzzle_set(path: str | os.PathLike[str]) -> PuzzleSet:
    """
    Load and verify a puzzle manifest.

    Raises:
        TemplateError: If the file is missing, is not a valid manifest, has the wrong version,
            or any template fails verification.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text())
    except FileNotFoundError:
        raise TemplateError(f"puzzle manifest not found: {p}") from None
    except json.JSONDecodeError as exc:
        raise TemplateError(f"puzzle manifest is not JSON: {p}") from exc
    try:
        manifest = PuzzleManifest.model_validate(data)
    except ValidationError as exc:
        raise TemplateError(f"puzzle manifest is malformed: {p}") from exc
    if manifest.version != MANIFEST_VERSION:
        raise TemplateError(
            f"puzzle manifest version {manifest.version} unsupported (expected {MANIFEST_VERSION})"
        )
    ps = PuzzleSet.from_templates(manifest.to_templates())
    logger.info("loaded %d templates from %s", len(ps.templates), p)
    return ps


_ACTIVE: PuzzleSet | None = None


def install_puzzle_set(ps: PuzzleSet | None) -> None:
    """Install `ps` as the process-wide puzzle set (None clears it so the next use reloads)."""
    global _ACTIVE
    _ACTIVE = ps


def puzzle_set() -> PuzzleSet:
    """
    Process-wide puzzle set, loaded from configuration on first use.

    Without a configured manifest the set holds the built-in templates only.

    Raises:
        TemplateError: If the configured manifest cannot be loaded or verified.
    """
    global _ACTIVE
    if _ACTIVE is None:
        # config sits above core; import on first use only
        from ..config import OfferSettings

        manifest = OfferSettings.load().puzzle_manifest
        if manifest:
            _ACTIVE = load_puzzle_set(manifest)
        else:
            logger.debug("no puzzle manifest configured; asset makers unavailable")
            _ACTIVE = PuzzleSet.from_templates()
    return _ACTIVE
