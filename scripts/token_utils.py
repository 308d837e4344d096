#!/usr/bin/env python3
"""Shared helpers for the design-token migration scripts."""
from __future__ import annotations

import json
import pathlib
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

ROOT = pathlib.Path(__file__).resolve().parents[1]
TABLES_DEFAULT = ROOT / "configs" / "tokens" / "tables.yaml"

LEGACY_DIR = "design-tokens-existing"
TOKENS_DIR = "design-tokens"
BUILD_DIR = "design-tokens-build"
LEGACY_SCHEME_DIR = "Color scheme (test)"
MODES = ("light", "dark")


class TokenFileError(RuntimeError):
    """A token file could not be read or parsed."""


class MissingTokenError(LookupError):
    """A required legacy token path is absent."""

    def __init__(self, path: str, source: str = "") -> None:
        self.path = path
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"missing required token '{path}'{where}")


@dataclass(frozen=True)
class CssCategory:
    key: str
    label: str
    match: Optional[str]
    target: Optional[str]
    exact: Mapping[str, str]


@dataclass(frozen=True)
class TokenTables:
    roles: Tuple[str, ...]
    shade_count: int
    themes: Mapping[str, Mapping[str, str]]
    shared: Mapping[str, str]
    link_visited: str
    theme_family_order: Tuple[str, ...]
    main_color: str
    support_colors: Tuple[str, ...]
    passthrough_keys: Tuple[str, ...]
    token_set_order: Tuple[str, ...]
    owned_groups: Tuple[str, ...]
    semantic_sets: Mapping[str, str]
    config: Mapping[str, Any]
    css_prefix: str
    css_skip_exact: Tuple[str, ...]
    css_skip_patterns: Tuple[str, ...]
    css_categories: Tuple[CssCategory, ...]

    @property
    def shades(self) -> Tuple[str, ...]:
        return tuple(str(i) for i in range(1, self.shade_count + 1))

    @property
    def theme_names(self) -> Tuple[str, ...]:
        return tuple(self.themes)

    @property
    def family_names(self) -> Tuple[str, ...]:
        """Theme-specific families followed by the shared ones."""
        return self.theme_family_order + tuple(self.shared)

    def role_for_shade(self, shade: int | str) -> str:
        return self.roles[int(shade) - 1]

    def legacy_paths(self, theme: str) -> Dict[str, str]:
        """Target family -> dotted legacy path, for one theme."""
        paths = dict(self.themes[theme])
        paths.update(self.shared)
        return paths


def _frozen(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _frozen(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_frozen(v) for v in value)
    return value


def parse_tables(data: Dict[str, Any]) -> TokenTables:
    """Build immutable tables from the decoded YAML mapping."""
    roles = tuple(data["roles"])
    shade_count = int(data.get("shade_count", 16))
    if len(roles) != shade_count:
        raise ValueError(f"expected {shade_count} roles, found {len(roles)}")
    css = data.get("css", {})
    categories = tuple(
        CssCategory(
            key=entry["key"],
            label=entry["label"],
            match=entry.get("match"),
            target=entry.get("target"),
            exact=MappingProxyType(dict(entry.get("exact") or {})),
        )
        for entry in css.get("categories", [])
    )
    return TokenTables(
        roles=roles,
        shade_count=shade_count,
        themes=_frozen(data["themes"]),
        shared=_frozen(data["shared"]),
        link_visited=data["link_visited"],
        theme_family_order=tuple(data["theme_family_order"]),
        main_color=data["main_color"],
        support_colors=tuple(data["support_colors"]),
        passthrough_keys=tuple(data.get("passthrough_keys", [])),
        token_set_order=tuple(data["token_set_order"]),
        owned_groups=tuple(data["owned_groups"]),
        semantic_sets=_frozen(data["semantic_sets"]),
        config=_frozen(data.get("config", {})),
        css_prefix=css.get("prefix", "ds"),
        css_skip_exact=tuple(css.get("skip_exact", [])),
        css_skip_patterns=tuple(css.get("skip_patterns", [])),
        css_categories=categories,
    )


def load_tables(path: pathlib.Path | None = None) -> TokenTables:
    table_path = path or TABLES_DEFAULT
    try:
        with table_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise TokenFileError(f"missing tables file {table_path}") from exc
    except yaml.YAMLError as exc:
        raise TokenFileError(f"invalid YAML in {table_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TokenFileError(f"{table_path} root must be a mapping")
    return parse_tables(data)


def thaw(value: Any) -> Any:
    """Plain dict/list copy of a frozen table value, for JSON output."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


def read_json(path: pathlib.Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TokenFileError(f"missing {path}") from exc
    except json.JSONDecodeError as exc:
        raise TokenFileError(f"invalid JSON in {path}: {exc}") from exc


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def write_json(path: pathlib.Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(data), encoding="utf-8")


def lookup_path(tree: Any, dotted: str) -> Any:
    """Walk a dotted path; segments may contain spaces. None when absent."""
    node = tree
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def require_path(tree: Any, dotted: str, source: str = "") -> Any:
    node = lookup_path(tree, dotted)
    if node is None:
        raise MissingTokenError(dotted, source)
    return node


def color_token(value: Any) -> Dict[str, Any]:
    return {"$type": "color", "$value": value}


def alias(*segments: str) -> str:
    return "{" + ".".join(segments) + "}"


def new_registry_id() -> str:
    return uuid.uuid4().hex


IdFactory = Callable[[], str]


def strip_ids(entries: list) -> list:
    """Registry entries without their generated ids."""
    return [{k: v for k, v in entry.items() if k != "id"} for entry in entries]
