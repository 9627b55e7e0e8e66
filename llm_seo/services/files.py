"""Small filesystem helpers shared by the readers and writers."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel

from llm_seo.services.paths import is_ignored_segment, is_markdown_file

logger = logging.getLogger(__name__)


def scan_markdown_files(root: Path) -> List[str]:
    """Relative POSIX paths of every routable markdown file below *root*.

    Private segments (``_``/``.`` prefixes) and ``readme.md`` files are
    skipped.  A missing *root* yields an empty list.
    """
    if not root.is_dir():
        return []
    results: List[str] = []
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(name for name in dirs if not is_ignored_segment(name))
        for name in sorted(files):
            if is_ignored_segment(name) or not is_markdown_file(name):
                continue
            results.append(Path(current, name).relative_to(root).as_posix())
    return results


def read_json(path: Path) -> Optional[Any]:
    """Parsed JSON content of *path*, or *None* when missing or unreadable."""
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Ignoring unreadable JSON file %s: %s", path, exc)
        return None


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def dump_models(models: Iterable[BaseModel], exclude: Optional[set] = None) -> List[Any]:
    return [model.model_dump(by_alias=True, exclude_none=True, exclude=exclude) for model in models]


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as indented UTF-8 JSON with a trailing newline."""
    return write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
