"""Error taxonomy.

Only fatal content errors are raised.  Missing directories, caches and git
history are treated as "no data" by the services that read them.
"""

from typing import List


class LlmSeoError(Exception):
    """Base class for errors raised by llm_seo."""


class DuplicateRouteError(LlmSeoError, ValueError):
    """Two content sources resolved to the same route path."""

    def __init__(self, message: str, path: str, sources: List[str]) -> None:
        super().__init__(message)
        self.path = path
        self.sources = list(sources)
