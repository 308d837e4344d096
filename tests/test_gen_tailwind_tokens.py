from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

import gen_tailwind_tokens as tw

THEME_CSS = """
:root, [data-color-scheme="light"] {
  --ds-color-accent-1: #fff;
  --ds-size-4: calc(var(--ds-size-unit) * 4);
  --ds-size-unit: 4px;
  --ds-heading-large: 500 2rem/1.3 var(--ds-font-family);
  --ds-link-color-visited: #681e7a;
  --ds-font-family: Inter;
  --ds-border-radius-md: 8px;
  --ds-border-radius-base: 4px;
  --_ds-font-size-factor: 1;
  --ds-unknown-thing: 1;
}
[data-color-scheme="dark"] {
  --ds-color-accent-1: #000;
  --ds-opacity-disabled: 0.3;
}
"""


def test_extract_names_dedupes_in_first_occurrence_order() -> None:
    names = tw.extract_variable_names(THEME_CSS, "ds")
    assert names[:3] == ["color-accent-1", "size-4", "size-unit"]
    assert names.count("color-accent-1") == 1
    assert names[-1] == "opacity-disabled"
    assert "_ds-font-size-factor" not in names


@pytest.mark.parametrize(
    "name, expected",
    [
        ("color-accent-1", ("colors", "--color-accent-1")),
        ("link-color-visited", ("colors", "--color-link-visited")),
        ("size-4", ("spacing", "--spacing-4")),
        ("font-size-md", ("fontSize", "--font-size-md")),
        ("shadow-xl", ("shadows", "--shadow-xl")),
        ("border-radius-full", ("borderRadius", "--radius-full")),
        ("font-weight-medium", ("fontWeight", "--font-weight-medium")),
        ("font-family", ("fontFamily", "--font-family-default")),
        ("line-height-md", ("lineHeight", "--line-height-md")),
        ("letter-spacing-1", ("letterSpacing", "--letter-spacing-1")),
        ("border-width-focus", ("borderWidth", "--border-width-focus")),
        ("opacity-disabled", ("opacity", "--opacity-disabled")),
        ("unknown-thing", None),
    ],
)
def test_classify(tables, name, expected) -> None:
    assert tw.classify(name, tables) == expected


@pytest.mark.parametrize(
    "name",
    ["heading-large", "body-md", "size-base", "size-mode-font-size", "size--1", "border-radius-scale"],
)
def test_internal_names_are_skipped(tables, name) -> None:
    assert tw.is_skipped(name, tables)
    assert not tw.is_skipped("size-4", tables)


def test_render_groups_by_category(tables) -> None:
    names = tw.extract_variable_names(THEME_CSS, "ds")
    text = tw.render_theme(names, "design-tokens-build/theme.css", tables)
    assert text == (
        "/* Generated from design-tokens-build/theme.css */\n"
        "\n"
        "@theme {\n"
        "  /* Colors */\n"
        "  --color-accent-1: var(--ds-color-accent-1);\n"
        "  --color-link-visited: var(--ds-link-color-visited);\n"
        "\n"
        "  /* Spacing */\n"
        "  --spacing-4: var(--ds-size-4);\n"
        "\n"
        "  /* Border Radius */\n"
        "  --radius-md: var(--ds-border-radius-md);\n"
        "\n"
        "  /* Font Family */\n"
        "  --font-family-default: var(--ds-font-family);\n"
        "\n"
        "  /* Opacity */\n"
        "  --opacity-disabled: var(--ds-opacity-disabled);\n"
        "}\n"
    )


def test_render_with_no_variables(tables) -> None:
    assert tw.render_theme([], "empty.css", tables) == "/* Generated from empty.css */\n\n@theme {\n}\n"


def test_prefix_comes_from_tables(tables) -> None:
    custom = dataclasses.replace(tables, css_prefix="x")
    names = tw.extract_variable_names("--x-color-a: red; --ds-color-b: blue;", "x")
    assert tw.render_theme(names, "a.css", custom).count("var(--x-color-a)") == 1


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_aggregate_merges_inputs(tmp_path: Path, tables) -> None:
    first = _write(tmp_path / "HI.css", "--ds-color-a-1: red; --ds-size-2: 8px;")
    second = _write(tmp_path / "Mareano.css", "--ds-color-a-1: blue; --ds-color-b-1: green;")
    out = tmp_path / "build" / "tailwind-theme.css"

    planned = tw.plan_outputs([first, second], "aggregate", tables, output=out, root=tmp_path)
    assert list(planned) == [out]
    text = planned[out]
    assert "Generated from HI.css, Mareano.css" in text
    assert text.index("--color-a-1:") < text.index("--color-b-1:")
    assert text.count("--color-a-1:") == 1


def test_per_file_writes_one_output_per_input(tmp_path: Path, tables) -> None:
    first = _write(tmp_path / "HI.css", "--ds-color-a-1: red;")
    second = _write(tmp_path / "Mareano.css", "--ds-shadow-sm: none;")
    out_dir = tmp_path / "out"

    planned = tw.plan_outputs([first, second], "per-file", tables, output_dir=out_dir, root=tmp_path)
    assert list(planned) == [out_dir / "tailwind-HI.css", out_dir / "tailwind-Mareano.css"]
    assert "--shadow-sm: var(--ds-shadow-sm);" in planned[out_dir / "tailwind-Mareano.css"]
    assert "shadow" not in planned[out_dir / "tailwind-HI.css"]


def test_unknown_mode_rejected(tmp_path: Path, tables) -> None:
    with pytest.raises(ValueError):
        tw.plan_outputs([], "fan-in", tables)


def test_main_writes_files(tmp_path: Path, capsys) -> None:
    css = _write(tmp_path / "theme.css", THEME_CSS)
    out = tmp_path / "tailwind-theme.css"
    assert tw.main([str(css), "--output", str(out)]) == 0
    assert out.read_text(encoding="utf-8").endswith("}\n")
    assert f"Wrote {out}" in capsys.readouterr().out

    assert tw.main([str(css), "--mode", "per-file", "--output-dir", str(tmp_path / "per")]) == 0
    assert (tmp_path / "per" / "tailwind-theme.css").exists()


def test_main_missing_input(tmp_path: Path, capsys) -> None:
    assert tw.main([str(tmp_path / "nope.css")]) == 2
    assert "error: missing" in capsys.readouterr().err


def test_per_file_rejects_colliding_outputs(tmp_path: Path, tables) -> None:
    light = _write(tmp_path / "light" / "theme.css", "--ds-color-a-1: red;")
    dark = _write(tmp_path / "dark" / "theme.css", "--ds-shadow-sm: none;")
    with pytest.raises(ValueError, match="tailwind-theme.css"):
        tw.plan_outputs([light, dark], "per-file", tables, output_dir=tmp_path / "out", root=tmp_path)


def test_per_file_same_name_in_own_directories(tmp_path: Path, tables) -> None:
    light = _write(tmp_path / "light" / "theme.css", "--ds-color-a-1: red;")
    dark = _write(tmp_path / "dark" / "theme.css", "--ds-shadow-sm: none;")
    planned = tw.plan_outputs([light, dark], "per-file", tables, root=tmp_path)
    assert list(planned) == [light.parent / "tailwind-theme.css", dark.parent / "tailwind-theme.css"]


def test_main_reports_colliding_outputs(tmp_path: Path, capsys) -> None:
    light = _write(tmp_path / "light" / "theme.css", "--ds-color-a-1: red;")
    dark = _write(tmp_path / "dark" / "theme.css", "--ds-shadow-sm: none;")
    out_dir = tmp_path / "out"
    args = [str(light), str(dark), "--mode", "per-file", "--output-dir", str(out_dir)]
    assert tw.main(args) == 2
    assert "error:" in capsys.readouterr().err
    assert not out_dir.exists()


def test_main_reports_missing_tables(tmp_path: Path, capsys) -> None:
    css = _write(tmp_path / "theme.css", THEME_CSS)
    assert tw.main([str(css), "--tables", str(tmp_path / "none.yaml")]) == 1
    assert "error: missing tables file" in capsys.readouterr().err
