from pathlib import Path
from typing import Any, Callable

import pytest

from llm_seo.config import LlmSeoConfig


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., LlmSeoConfig]:
    """Config rooted at tmp_path with a fixed base URL."""

    def _make(**overrides: Any) -> LlmSeoConfig:
        data = {"root_dir": str(tmp_path), "base_url": "https://example.com", **overrides}
        return LlmSeoConfig.model_validate(data)

    return _make
