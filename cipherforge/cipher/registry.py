from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import Plugin, Transform
from .facade import TwofishCipher


def builtins() -> Dict[str, Plugin]:
    """Plug-ins shipped with this package, keyed by lower-case name."""
    plugins = [
        Plugin(
            name=TwofishCipher.name,
            factory=TwofishCipher,
            version=TwofishCipher.version,
            category=TwofishCipher.category,
            tags=TwofishCipher.tags,
            description=TwofishCipher.description,
        ),
    ]
    return {p.name.lower(): p for p in plugins}


class AlgorithmRegistry:
    def __init__(self):
        self._plugins: Dict[str, Plugin] = builtins()

    def register(self, plugin: Plugin, *, replace: bool = False) -> None:
        key = plugin.name.lower()
        if key in self._plugins and not replace:
            raise ValueError(f"Plug-in already registered: {plugin.name}")
        self._plugins[key] = plugin

    def get(self, name: str) -> Plugin:
        key = name.lower()
        if key not in self._plugins:
            raise KeyError(f"Unknown algorithm: {name}")
        return self._plugins[key]

    def create(self, name: str, **init_options: Any) -> Transform:
        return self.get(name).create(**init_options)

    def list(self) -> List[Plugin]:
        return list(self._plugins.values())

    def list_by_category(self, category: str, *, tag: Optional[str] = None) -> List[Plugin]:
        category = category.lower()
        out = [p for p in self._plugins.values() if p.category.lower() == category]
        if tag:
            out = [p for p in out if tag in p.tags]
        out.sort(key=lambda p: p.name)
        return out

    def exists(self, name: str) -> bool:
        return name.lower() in self._plugins
