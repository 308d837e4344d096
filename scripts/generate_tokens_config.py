#!/usr/bin/env python3
"""
Generate designsystemet-existing.config.json from the converted token tree.

For every theme, the generated light/dark color schemes are compared shade by
shade with the legacy Light/Dark files. Wherever a shade differs, the legacy
value is recorded as an override under its semantic role name so the
downstream build can restore it. Run scripts/convert_tokens.py first.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from token_utils import (
    LEGACY_DIR,
    LEGACY_SCHEME_DIR,
    MODES,
    ROOT,
    TOKENS_DIR,
    TokenFileError,
    TokenTables,
    dump_json,
    load_tables,
    lookup_path,
    read_json,
    thaw,
    write_json,
)

CONFIG_FILE = "designsystemet-existing.config.json"
GENERATED_ROOT = "theme"


def _shade_value(family: Dict[str, Any], shade: str) -> Optional[str]:
    token = family.get(shade)
    if not isinstance(token, dict):
        return None
    value = token.get("$value")
    return value if isinstance(value, str) else None


def _same(left: Optional[str], right: Optional[str]) -> bool:
    if left is None or right is None:
        return left is right
    return left.lower() == right.lower()


def build_overrides(
    gen_light: Dict[str, Any],
    gen_dark: Dict[str, Any],
    src_light: Dict[str, Any],
    src_dark: Dict[str, Any],
    mapping: Dict[str, str],
    tables: TokenTables,
    missing: Optional[List[str]] = None,
) -> Dict[str, Dict[str, Dict[str, str]]]:
    """Family -> role -> {light?, dark?} for every shade that differs.

    `mapping` maps a generated family name to its dotted legacy path. A family
    missing on any of the four sides is reported and skipped entirely.
    """
    overrides: Dict[str, Dict[str, Dict[str, str]]] = {}
    for family, path in mapping.items():
        src_l = lookup_path(src_light, path)
        src_d = lookup_path(src_dark, path)
        gen_l = gen_light.get(family)
        gen_d = gen_dark.get(family)
        if not src_l or not src_d or not gen_l or not gen_d:
            print(f"[warn] MISSING: {family} ({path})", file=sys.stderr)
            if missing is not None:
                missing.append(family)
            continue

        for shade in tables.shades:
            legacy_l = _shade_value(src_l, shade)
            legacy_d = _shade_value(src_d, shade)
            light_differs = not _same(_shade_value(gen_l, shade), legacy_l)
            dark_differs = not _same(_shade_value(gen_d, shade), legacy_d)
            if not (light_differs or dark_differs):
                continue
            entry: Dict[str, str] = {}
            for side, differs, legacy_value in (
                ("light", light_differs, legacy_l),
                ("dark", dark_differs, legacy_d),
            ):
                if not differs:
                    continue
                if legacy_value is None:
                    print(f"[warn] no legacy {side} value for {path}.{shade}; not overridden", file=sys.stderr)
                    continue
                entry[side] = legacy_value
            if not entry:
                continue
            overrides.setdefault(family, {})[tables.role_for_shade(shade)] = entry
    return overrides


def build_theme_config(
    theme: str, overrides: Dict[str, Any], tables: TokenTables
) -> Dict[str, Any]:
    seeds = tables.config["seeds"][theme]
    return {
        "colors": {
            "main": thaw(seeds["main"]),
            "support": thaw(seeds["support"]),
            "neutral": seeds["neutral"],
        },
        "overrides": {
            "severity": thaw(tables.config["severity"]),
            "colors": overrides,
        },
        "borderRadius": seeds["border_radius"],
    }


def build_config(
    overrides_by_theme: Dict[str, Dict[str, Any]], tables: TokenTables
) -> Dict[str, Any]:
    return {
        "$schema": tables.config["schema"],
        "outDir": tables.config["out_dir"],
        "themes": {
            theme: build_theme_config(theme, overrides, tables)
            for theme, overrides in overrides_by_theme.items()
        },
    }


def load_generated(tokens_dir: Path, mode: str, theme: str) -> Dict[str, Any]:
    doc = read_json(tokens_dir / "primitives" / "modes" / "color-scheme" / mode / f"{theme}.json")
    root = doc.get(GENERATED_ROOT) if isinstance(doc, dict) else None
    return root if isinstance(root, dict) else {}


def compute_overrides(root: Path, tables: TokenTables) -> Dict[str, Dict[str, Any]]:
    scheme_dir = root / LEGACY_DIR / LEGACY_SCHEME_DIR
    legacy = {
        "light": read_json(scheme_dir / "Light.json"),
        "dark": read_json(scheme_dir / "Dark.json"),
    }
    tokens_dir = root / TOKENS_DIR

    overrides_by_theme: Dict[str, Dict[str, Any]] = {}
    for theme in tables.theme_names:
        generated = {mode: load_generated(tokens_dir, mode, theme) for mode in MODES}
        overrides_by_theme[theme] = build_overrides(
            generated["light"],
            generated["dark"],
            legacy["light"],
            legacy["dark"],
            tables.legacy_paths(theme),
            tables,
        )
    return overrides_by_theme


def print_summary(overrides_by_theme: Dict[str, Dict[str, Any]]) -> None:
    print(f"Config written to {CONFIG_FILE}")
    for theme, overrides in overrides_by_theme.items():
        print(f"\n{theme} overrides:")
        for family, roles in overrides.items():
            print(f"  {family}: {len(roles)} tokens")


def parse_args(argv: List[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"Generate {CONFIG_FILE} with legacy color overrides."
    )
    parser.add_argument("--root", type=Path, default=ROOT, help="Repository root.")
    parser.add_argument(
        "--tables",
        type=Path,
        default=None,
        help="Naming tables YAML (default: configs/tokens/tables.yaml).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify the config file is up to date without writing.",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        tables = load_tables(args.tables)
        overrides_by_theme = compute_overrides(args.root, tables)
    except TokenFileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    config = build_config(overrides_by_theme, tables)
    out_path = args.root / CONFIG_FILE
    if args.check:
        current = out_path.read_text(encoding="utf-8") if out_path.exists() else None
        if current != dump_json(config):
            print(f"{CONFIG_FILE} is out of date; re-run without --check", file=sys.stderr)
            return 1
        print(f"[info] {CONFIG_FILE} up to date")
        return 0

    write_json(out_path, config)
    print_summary(overrides_by_theme)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
