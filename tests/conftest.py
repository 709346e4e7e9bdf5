from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from partial_offers.core.hashing import tree_hash
from partial_offers.core.puzzles import (
    ASSET_MAKER_TEMPLATES,
    PuzzleSet,
    ScriptTemplate,
    install_puzzle_set,
)
from partial_offers.core.serde import program_to_bytes, to_program


def _stand_in_template(name: str) -> ScriptTemplate:
    # Never evaluated; only the hashes matter.
    prog = to_program([b"stand-in", name.encode()])
    return ScriptTemplate(name=name, reveal=program_to_bytes(prog), golden_hash=tree_hash(prog))


@pytest.fixture(autouse=True)
def stand_in_puzzles(monkeypatch: pytest.MonkeyPatch) -> Iterator[PuzzleSet]:
    for key in (
        "PARTIAL_OFFERS_PUZZLE_MANIFEST",
        "PARTIAL_OFFERS_COMPRESSION_LEVEL",
        "PARTIAL_OFFERS_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    ps = PuzzleSet.from_templates({name: _stand_in_template(name) for name in ASSET_MAKER_TEMPLATES})
    install_puzzle_set(ps)
    yield ps
    install_puzzle_set(None)


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    templates = {}
    for name in ASSET_MAKER_TEMPLATES:
        t = _stand_in_template(name)
        templates[name] = {"reveal": t.reveal.hex(), "hash": t.golden_hash.hex()}
    p = tmp_path / "puzzles.json"
    p.write_text(json.dumps({"version": 1, "templates": templates}))
    return p
