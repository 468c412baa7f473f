"""Target resolver interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from ctrlattr.core.model import ParsedAttribute


class TargetResolver(Protocol):
    def resolve(self, record: ParsedAttribute) -> Sequence[Any]:
        """Return the target handles the record should be applied to."""
