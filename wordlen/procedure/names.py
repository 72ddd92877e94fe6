"""
Fresh name generation

Literal aliases ("lit!0", "lit!1", ...) and synthetic pool keys ("f!0", ...)
must be unique within one procedure run. Each run owns its own generator so
that runs stay independent of each other.
"""

from typing import Dict


class FreshNames:
    """Per-run generator of names that cannot clash with user identifiers"""

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def fresh(self, prefix: str) -> str:
        n = self._counters.get(prefix, 0)
        self._counters[prefix] = n + 1
        return f"{prefix}!{n}"
