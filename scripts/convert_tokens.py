#!/usr/bin/env python3
"""
Convert the legacy design-token tree into the design-tokens layout.

Reads design-tokens-existing/ (color scheme Light/Dark files and per-theme
files), re-keys the color families per theme, and writes:

  primitives/modes/color-scheme/{light,dark}/<theme>.json
  themes/<theme>.json
  semantic/color.json
  semantic/modes/main-color/<main>.json
  semantic/modes/support-color/<brand>.json
  $metadata.json ($tokenSetOrder rewritten)
  $themes.json   (owned groups regenerated, others kept)

Usage: python3 scripts/convert_tokens.py [--root DIR] [--tables FILE] [--check]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from token_utils import (
    LEGACY_DIR,
    LEGACY_SCHEME_DIR,
    MODES,
    ROOT,
    TOKENS_DIR,
    IdFactory,
    MissingTokenError,
    TokenFileError,
    TokenTables,
    alias,
    color_token,
    dump_json,
    load_tables,
    new_registry_id,
    read_json,
    require_path,
    strip_ids,
    write_json,
)

FOCUS_FAMILY = "neutral"
FOCUS_INNER_SHADE = "1"
FOCUS_OUTER_SHADE = "11"

METADATA_FILE = "$metadata.json"
THEMES_FILE = "$themes.json"


# Block builders ---------------------------------------------------------------

def color_shades(source: Dict[str, Any], tables: TokenTables, where: str = "") -> Dict[str, Any]:
    """Copy the numbered shades of one legacy color family."""
    out: Dict[str, Any] = {}
    for shade in tables.shades:
        if shade not in source:
            raise MissingTokenError(f"{where}.{shade}" if where else shade)
        out[shade] = source[shade]
    return out


def semantic_block(prefix: str, tables: TokenTables) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for index, role in enumerate(tables.roles, start=1):
        out[role] = color_token(alias(prefix, str(index)))
    return out


def mode_block(outer_key: str, family: str, tables: TokenTables) -> Dict[str, Any]:
    """Main/support mode set: every role aliases the semantic role of `family`."""
    out = {role: color_token(alias("color", family, role)) for role in tables.roles}
    return {"color": {outer_key: out}}


def theme_color_alias(family: str, tables: TokenTables) -> Dict[str, Any]:
    return {shade: color_token(alias("theme", family, shade)) for shade in tables.shades}


# Color scheme files -----------------------------------------------------------

def resolve_family_map(
    tree: Dict[str, Any], paths: Dict[str, str], source: str = ""
) -> Dict[str, Dict[str, Any]]:
    """Target family name -> legacy family node, for one mode of one theme."""
    return {family: require_path(tree, path, source) for family, path in paths.items()}


def build_color_scheme(
    theme_colors: Dict[str, Dict[str, Any]],
    shared_colors: Dict[str, Dict[str, Any]],
    link_visited: str,
    tables: TokenTables,
) -> Dict[str, Any]:
    theme: Dict[str, Any] = {}
    for name, source in list(theme_colors.items()) + list(shared_colors.items()):
        theme[name] = color_shades(source, tables, name)

    neutral = theme[FOCUS_FAMILY]
    theme["link"] = {"visited": color_token(link_visited)}
    theme["focus"] = {
        "inner": color_token(neutral[FOCUS_INNER_SHADE]["$value"]),
        "outer": color_token(neutral[FOCUS_OUTER_SHADE]["$value"]),
    }
    return {"theme": theme}


def build_color_schemes(
    legacy: Dict[str, Dict[str, Any]], tables: TokenTables
) -> Dict[Tuple[str, str], Dict[str, Any]]:
    """(mode, theme) -> color scheme document, for every theme in both modes."""
    schemes: Dict[Tuple[str, str], Dict[str, Any]] = {}
    for mode in MODES:
        tree = legacy[mode]
        source = f"{mode.capitalize()}.json"
        shared = resolve_family_map(tree, dict(tables.shared), source)
        visited = require_path(tree, f"{tables.link_visited}.$value", source)
        for theme in tables.theme_names:
            families = resolve_family_map(tree, dict(tables.themes[theme]), source)
            schemes[(mode, theme)] = build_color_scheme(families, shared, visited, tables)
    return schemes


# Theme and semantic files -----------------------------------------------------

def build_theme_file(legacy_theme: Dict[str, Any], tables: TokenTables) -> Dict[str, Any]:
    color: Dict[str, Any] = {}
    for family in tables.family_names:
        color[family] = theme_color_alias(family, tables)
    color["link"] = {"visited": color_token("{theme.link.visited}")}
    color["focus"] = {
        "inner-color": color_token("{theme.focus.inner}"),
        "outer-color": color_token("{theme.focus.outer}"),
    }

    result: Dict[str, Any] = {"color": color}
    # Absent non-color tokens stay absent.
    for key in tables.passthrough_keys:
        if legacy_theme.get(key):
            result[key] = legacy_theme[key]
    return result


def build_semantic_color(tables: TokenTables) -> Dict[str, Any]:
    color: Dict[str, Any] = {}
    for family in tables.family_names:
        color[family] = semantic_block(f"color.{family}", tables)
    color["focus"] = {
        "inner": color_token("{color.focus.inner-color}"),
        "outer": color_token("{color.focus.outer-color}"),
    }
    return {
        "color": color,
        "link": {"color": {"visited": color_token("{color.link.visited}")}},
    }


# Manifests --------------------------------------------------------------------

def update_metadata(metadata: Dict[str, Any], tables: TokenTables) -> Dict[str, Any]:
    updated = dict(metadata)
    updated["tokenSetOrder"] = list(tables.token_set_order)
    return updated


def _entry(new_id: IdFactory, name: str, sets: Dict[str, str], group: str) -> Dict[str, Any]:
    return {"id": new_id(), "name": name, "selectedTokenSets": sets, "group": group}


def update_registry(
    entries: List[Dict[str, Any]],
    tables: TokenTables,
    new_id: IdFactory = new_registry_id,
) -> List[Dict[str, Any]]:
    """Replace the entries of every owned group; other groups keep their order."""
    owned = set(tables.owned_groups)
    registry = [entry for entry in entries if entry.get("group") not in owned]

    for theme in tables.theme_names:
        for mode in MODES:
            token_set = f"primitives/modes/color-scheme/{mode}/{theme}"
            registry.append(
                _entry(new_id, f"{mode.capitalize()}/{theme}", {token_set: "enabled"}, "Color scheme")
            )
    for theme in tables.theme_names:
        registry.append(_entry(new_id, theme, {f"themes/{theme}": "enabled"}, "Theme"))
    registry.append(_entry(new_id, "Semantic", dict(tables.semantic_sets), "Semantic"))
    registry.append(
        _entry(
            new_id,
            tables.main_color,
            {f"semantic/modes/main-color/{tables.main_color}": "enabled"},
            "Main color",
        )
    )
    for brand in tables.support_colors:
        registry.append(
            _entry(new_id, brand, {f"semantic/modes/support-color/{brand}": "enabled"}, "Support color")
        )
    return registry


# Driver -----------------------------------------------------------------------

def build_outputs(
    root: Path, tables: TokenTables, new_id: IdFactory = new_registry_id
) -> Dict[str, Any]:
    """Relative output path (under design-tokens/) -> document, in write order."""
    legacy_dir = root / LEGACY_DIR
    scheme_dir = legacy_dir / LEGACY_SCHEME_DIR
    legacy = {
        "light": read_json(scheme_dir / "Light.json"),
        "dark": read_json(scheme_dir / "Dark.json"),
    }
    tokens_dir = root / TOKENS_DIR

    outputs: Dict[str, Any] = {}
    schemes = build_color_schemes(legacy, tables)
    for theme in tables.theme_names:
        for mode in MODES:
            outputs[f"primitives/modes/color-scheme/{mode}/{theme}.json"] = schemes[(mode, theme)]

    for theme in tables.theme_names:
        legacy_theme = read_json(legacy_dir / "themes" / f"{theme}.json")
        outputs[f"themes/{theme}.json"] = build_theme_file(legacy_theme, tables)

    outputs["semantic/color.json"] = build_semantic_color(tables)
    outputs[f"semantic/modes/main-color/{tables.main_color}.json"] = mode_block(
        "main", tables.main_color, tables
    )
    for brand in tables.support_colors:
        outputs[f"semantic/modes/support-color/{brand}.json"] = mode_block("support", brand, tables)

    outputs[METADATA_FILE] = update_metadata(read_json(tokens_dir / METADATA_FILE), tables)
    outputs[THEMES_FILE] = update_registry(read_json(tokens_dir / THEMES_FILE), tables, new_id)
    return outputs


def stale_outputs(tokens_dir: Path, outputs: Dict[str, Any]) -> List[str]:
    """Outputs whose on-disk content differs (registry ids are ignored)."""
    stale: List[str] = []
    for rel, data in outputs.items():
        path = tokens_dir / rel
        if not path.exists():
            stale.append(rel)
            continue
        if rel == THEMES_FILE:
            current = read_json(path)
            if not isinstance(current, list) or strip_ids(current) != strip_ids(data):
                stale.append(rel)
        elif path.read_text(encoding="utf-8") != dump_json(data):
            stale.append(rel)
    return stale


def print_summary(outputs: Dict[str, Any], tables: TokenTables) -> None:
    print(f"Conversion complete. Files written to {TOKENS_DIR}/:")
    for rel in outputs:
        print(f"  {rel}")
    print("")
    print("Color mapping applied:")
    for theme in tables.theme_names:
        for family, path in tables.themes[theme].items():
            print(f"  [{theme}] {path} -> {family}")
    for family, path in tables.shared.items():
        print(f"  {path} -> {family}")
    print(f"  {tables.link_visited} -> link.visited")


def parse_args(argv: List[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert design-tokens-existing/ into the design-tokens/ layout."
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=ROOT,
        help="Repository root holding design-tokens-existing/ and design-tokens/.",
    )
    parser.add_argument(
        "--tables",
        type=Path,
        default=None,
        help="Naming tables YAML (default: configs/tokens/tables.yaml).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify generated files are up to date without writing.",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        tables = load_tables(args.tables)
        outputs = build_outputs(args.root, tables)
    except (TokenFileError, MissingTokenError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    tokens_dir = args.root / TOKENS_DIR
    if args.check:
        try:
            stale = stale_outputs(tokens_dir, outputs)
        except TokenFileError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        if stale:
            for rel in stale:
                print(f"{TOKENS_DIR}/{rel} is out of date; re-run without --check", file=sys.stderr)
            return 1
        print(f"[info] {len(outputs)} file(s) up to date")
        return 0

    for rel, data in outputs.items():
        write_json(tokens_dir / rel, data)
    print_summary(outputs, tables)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
