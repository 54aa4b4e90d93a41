from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional


def configure_logging(verbose: bool = False) -> None:
    """Console logging; markdown-it's own debug output stays quiet with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if verbose else "%(levelname)s %(message)s",
    )
    logging.getLogger("markdown_it").setLevel(logging.WARNING)


def read_markdown(path: Path) -> str:
    # utf-8-sig drops a leading BOM, which would otherwise hide a first-line "# " heading
    return path.read_text(encoding="utf-8-sig")


def write_flex_json(data: dict[str, Any], input_path: Path, output: Optional[str] = None) -> Path:
    """Write Flex JSON next to the input, to ``output``, or into ``output`` if it is a directory."""
    if not output:
        target = input_path.with_suffix(".json")
    elif Path(output).is_dir():
        target = Path(output) / f"{input_path.stem}.json"
    else:
        target = Path(output)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return target
