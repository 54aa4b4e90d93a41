import json
from pathlib import Path

import pytest

from MarkdownFlex import cli


def test_cli_writes_flex_message(tmp_path: Path):
    source = tmp_path / "note.md"
    source.write_text("# Заголовок\n\n- один\n- два\n", encoding="utf-8")
    cli.main([str(source), "--size", "kilo", "--alt-text", "note"])
    output = source.with_suffix(".json")
    assert output.exists()
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["type"] == "flex"
    assert data["altText"] == "note"
    assert data["contents"]["size"] == "kilo"
    assert data["contents"]["body"]["contents"][0]["text"] == "Заголовок"


def test_cli_box_output_into_directory(tmp_path: Path):
    source = tmp_path / "snippet.md"
    source.write_text("```\nprint(1)\n```\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    cli.main([str(source), "-o", str(out_dir), "--box"])
    data = json.loads((out_dir / "snippet.json").read_text(encoding="utf-8"))
    assert data["type"] == "box"
    assert data["paddingAll"] == "none"


def test_cli_applies_style(tmp_path: Path):
    source = tmp_path / "list.md"
    source.write_text("- item\n", encoding="utf-8")
    style = tmp_path / "style.yaml"
    style.write_text('bullet: "*"\n', encoding="utf-8")
    output = tmp_path / "result.json"
    cli.main([str(source), "-o", str(output), "--style", str(style), "--box"])
    data = json.loads(output.read_text(encoding="utf-8"))
    item = data["contents"][0]["contents"][0]
    assert item["contents"][0]["text"] == "*"


def test_cli_missing_input(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        cli.main([str(tmp_path / "missing.md")])


def test_cli_reads_markdown_with_bom(tmp_path: Path):
    source = tmp_path / "bom.md"
    source.write_text("\ufeff# Title\n", encoding="utf-8")
    output = tmp_path / "nested" / "bom.json"
    cli.main([str(source), "-o", str(output), "--box"])
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["contents"][0]["text"] == "Title"
    assert data["contents"][0]["weight"] == "bold"
