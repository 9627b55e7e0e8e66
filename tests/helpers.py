import json
from pathlib import Path
from typing import Any


def write(root: Path, relative_path: str, contents: str) -> Path:
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def write_json_file(root: Path, relative_path: str, data: Any) -> Path:
    return write(root, relative_path, json.dumps(data, indent=2))
