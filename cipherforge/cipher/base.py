from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Tuple


class Transform:
    """Contract shared by every reversible transformation plug-in."""

    def init(self, **options: Any) -> Dict[str, Any]:
        """Set default options that persist until ``dispose``."""
        return {"ok": True}

    def encrypt(self, data: Any, **options: Any) -> Any:  # pragma: no cover
        raise NotImplementedError

    def decrypt(self, data: Any, **options: Any) -> Any:  # pragma: no cover
        raise NotImplementedError

    def dispose(self) -> None:
        """Release anything held since ``init``."""


@dataclass(frozen=True)
class Plugin:
    name: str
    factory: Callable[[], Transform]
    version: str = "1.0.0"
    category: str = "Symmetric"
    tags: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""

    def create(self, **init_options: Any) -> Transform:
        instance = self.factory()
        if init_options:
            instance.init(**init_options)
        return instance
