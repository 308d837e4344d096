#!/usr/bin/env python3
"""
Re-export compiled --ds-* custom properties as a Tailwind @theme block.

Each input CSS file holds the variable set of one theme. Variable names are
collected (values are ignored), internal/composite variables are skipped, and
every remaining name is classified into a category whose Tailwind namespace
aliases the original variable:

    --color-accent-1: var(--ds-color-accent-1);
    --spacing-4: var(--ds-size-4);

Modes:
    aggregate  all inputs -> one file (default: design-tokens-build/tailwind-theme.css)
    per-file   each X.css -> tailwind-X.css in --output-dir (or next to X.css);
               two inputs mapping to one output are an error
"""
from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from token_utils import BUILD_DIR, ROOT, TokenFileError, TokenTables, load_tables

DEFAULT_INPUT = ROOT / BUILD_DIR / "theme.css"
DEFAULT_OUTPUT = ROOT / BUILD_DIR / "tailwind-theme.css"
FAN_OUT_MODES = ("aggregate", "per-file")


def variable_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"--{re.escape(prefix)}-([\w-]+)\s*:")


def extract_variable_names(css: str, prefix: str, into: Optional[Dict[str, None]] = None) -> List[str]:
    """Distinct declared names after `--<prefix>-`, in first-occurrence order."""
    names: Dict[str, None] = into if into is not None else {}
    for match in variable_pattern(prefix).finditer(css):
        names.setdefault(match.group(1), None)
    return list(names)


def is_skipped(name: str, tables: TokenTables) -> bool:
    if name in tables.css_skip_exact:
        return True
    return any(re.search(pattern, name) for pattern in tables.css_skip_patterns)


def classify(name: str, tables: TokenTables) -> Optional[Tuple[str, str]]:
    """(category key, target variable) for a name, or None when unmatched."""
    for category in tables.css_categories:
        if name in category.exact:
            return category.key, f"--{category.exact[name]}"
        if category.match and name.startswith(category.match):
            suffix = name[len(category.match):]
            return category.key, f"--{category.target}{suffix}"
    return None


def group_variables(names: Iterable[str], tables: TokenTables) -> Dict[str, List[Tuple[str, str]]]:
    """Category key -> [(target, source variable)], categories in table order."""
    groups: Dict[str, List[Tuple[str, str]]] = {c.key: [] for c in tables.css_categories}
    for name in names:
        if is_skipped(name, tables):
            continue
        classified = classify(name, tables)
        if classified is None:
            continue
        key, target = classified
        groups[key].append((target, f"--{tables.css_prefix}-{name}"))
    return groups


def render_theme(names: Iterable[str], source_label: str, tables: TokenTables) -> str:
    groups = group_variables(names, tables)
    lines = [f"/* Generated from {source_label} */", "", "@theme {"]
    for category in tables.css_categories:
        entries = groups[category.key]
        if not entries:
            continue
        lines.append(f"  /* {category.label} */")
        for target, source in entries:
            lines.append(f"  {target}: var({source});")
        lines.append("")
    if lines[-1] == "":
        lines.pop()
    lines.extend(["}", ""])
    return "\n".join(lines)


def _label(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def plan_outputs(
    inputs: List[Path],
    mode: str,
    tables: TokenTables,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    root: Path = ROOT,
) -> Dict[Path, str]:
    """Output path -> rendered CSS for the chosen fan-out strategy."""
    if mode not in FAN_OUT_MODES:
        raise ValueError(f"unknown mode '{mode}' (expected one of {', '.join(FAN_OUT_MODES)})")

    if mode == "aggregate":
        names: Dict[str, None] = {}
        for path in inputs:
            extract_variable_names(path.read_text(encoding="utf-8"), tables.css_prefix, names)
        label = ", ".join(_label(path, root) for path in inputs)
        return {output or DEFAULT_OUTPUT: render_theme(names, label, tables)}

    planned: Dict[Path, str] = {}
    for path in inputs:
        target_dir = output_dir or path.parent
        names_list = extract_variable_names(path.read_text(encoding="utf-8"), tables.css_prefix)
        target = target_dir / f"tailwind-{path.name}"
        if target in planned:
            raise ValueError(f"{_label(path, root)} and another input both map to {target}")
        planned[target] = render_theme(names_list, _label(path, root), tables)
    return planned


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate Tailwind @theme re-exports from compiled CSS.")
    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help=f"Compiled theme CSS files (default: {BUILD_DIR}/theme.css).",
    )
    parser.add_argument("--mode", choices=FAN_OUT_MODES, default="aggregate", help="Output fan-out strategy.")
    parser.add_argument("--output", type=Path, default=None, help="Output file for --mode aggregate.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for --mode per-file outputs (default: next to each input).",
    )
    parser.add_argument("--tables", type=Path, default=None, help="Naming tables YAML.")
    args = parser.parse_args(argv)

    inputs = list(args.inputs) or [DEFAULT_INPUT]
    missing = [path for path in inputs if not path.exists()]
    if missing:
        for path in missing:
            print(f"error: missing {path}", file=sys.stderr)
        return 2

    try:
        tables = load_tables(args.tables)
    except TokenFileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    try:
        planned = plan_outputs(inputs, args.mode, tables, args.output, args.output_dir)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    for path, text in planned.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
