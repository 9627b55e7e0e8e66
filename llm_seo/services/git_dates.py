"""Publish/update dates for content files taken from git history."""

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Dict, NamedTuple, Optional

logger = logging.getLogger(__name__)

_COMMIT_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}T")


class FileDates(NamedTuple):
    published_at: Optional[str]
    updated_at: Optional[str]


def parse_git_log(output: str) -> Dict[str, FileDates]:
    """Parse ``git log --format=%cI --name-only`` output.

    Commits are listed newest first, so the first date seen for a file is its
    update date and the last one is its publish date.
    """
    results: Dict[str, FileDates] = {}
    current_date: Optional[str] = None
    for line in output.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        if _COMMIT_DATE.match(trimmed):
            current_date = trimmed
            continue
        if not current_date:
            continue
        file_path = trimmed.replace("\\", "/")
        existing = results.get(file_path)
        if existing is None:
            results[file_path] = FileDates(current_date, current_date)
        else:
            results[file_path] = existing._replace(published_at=current_date)
    return results


def get_git_dates_for_files(root_dir: Path, target_dir: Path) -> Optional[Dict[str, FileDates]]:
    """Dates keyed by repository-relative file path, or *None* without git history."""
    if not (root_dir / ".git").exists():
        return None

    relative_dir = os.path.relpath(target_dir, root_dir)
    try:
        completed = subprocess.run(
            ["git", "log", "--format=%cI", "--name-only", "--", relative_dir],
            cwd=root_dir,
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git log failed in %s: %s", root_dir, exc)
        return None

    if completed.returncode != 0:
        logger.debug("git log exited with %s in %s", completed.returncode, root_dir)
        return None
    output = completed.stdout.strip()
    if not output:
        return None
    return parse_git_log(output)
