from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from token_utils import load_tables


def family(seed: int) -> Dict[str, Any]:
    """Sixteen color shades with values derived from `seed`."""
    return {
        str(i): {"$type": "color", "$value": f"#{seed:02x}{i:02x}{i:02x}"}
        for i in range(1, 17)
    }


def legacy_scheme(offset: int = 0) -> Dict[str, Any]:
    return {
        "HI": {
            "primary": family(0x10 + offset),
            "secondary": family(0x11 + offset),
            "tertiary": family(0x12 + offset),
            "brand3": family(0x13 + offset),
            "neutral": family(0x14 + offset),
        },
        "External": {
            "Mareano primary": family(0x20 + offset),
            "Mareano secondary": family(0x21 + offset),
            "Mareano teriary": family(0x22 + offset),
            "brand3": family(0x23 + offset),
            "neutral": family(0x24 + offset),
        },
        "globe": {
            "info": family(0x30 + offset),
            "success": family(0x31 + offset),
            "warning": family(0x32 + offset),
            "erroe": family(0x33 + offset),
            "purple": family(0x34 + offset),
        },
    }


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


@pytest.fixture
def tables():
    return load_tables()


@pytest.fixture
def token_root(tmp_path: Path) -> Path:
    """A repo root with a legacy token tree and the design-tokens manifests."""
    legacy = tmp_path / "design-tokens-existing"
    write_json(legacy / "Color scheme (test)" / "Light.json", legacy_scheme(0))
    write_json(legacy / "Color scheme (test)" / "Dark.json", legacy_scheme(0x40))
    write_json(
        legacy / "themes" / "HI.json",
        {
            "font-family": {"$type": "fontFamilies", "$value": "Inter"},
            "font-weight": {"regular": {"$type": "fontWeights", "$value": "400"}},
            "border-radius": {"$type": "borderRadius", "$value": "4"},
        },
    )
    write_json(
        legacy / "themes" / "Mareano.json",
        {"font-family": {"$type": "fontFamilies", "$value": "Open Sans"}},
    )
    tokens = tmp_path / "design-tokens"
    write_json(tokens / "$metadata.json", {"tokenSetOrder": ["old/set"], "extra": True})
    write_json(
        tokens / "$themes.json",
        [
            {"id": "keep1", "name": "Small", "selectedTokenSets": {}, "group": "Size"},
            {"id": "drop1", "name": "theme", "selectedTokenSets": {}, "group": "Theme"},
            {"id": "keep2", "name": "Primary", "selectedTokenSets": {}, "group": "Typography"},
        ],
    )
    return tmp_path
