from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar

T = TypeVar("T")


class ComponentRegistry:
    """Registry of named factories, optionally keyed by file suffix."""

    def __init__(self, default: Optional[str] = None) -> None:
        self._registry: Dict[str, Callable[..., Any]] = {}
        self._suffixes: Dict[str, str] = {}
        self.default = default

    def register(
        self, name: str, suffixes: Iterable[str] = ()
    ) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(factory: Callable[..., T]) -> Callable[..., T]:
            if name in self._registry:
                raise ValueError(f"Component '{name}' already registered.")
            self._registry[name] = factory
            for suffix in suffixes:
                self._suffixes[suffix.lower()] = name
            return factory

        return decorator

    def get(self, name: str) -> Callable[..., Any]:
        try:
            return self._registry[name]
        except KeyError as exc:
            raise KeyError(f"Component '{name}' not found.") from exc

    def name_for_path(self, path: str) -> str:
        """Name of the component registered for the suffix of ``path``."""
        name = self._suffixes.get(Path(path).suffix.lower(), self.default)
        if name is None:
            raise KeyError(f"No component registered for '{path}'.")
        return name

    def available(self) -> Dict[str, Callable[..., Any]]:
        return dict(self._registry)


# Document formats, looked up by input file suffix
document_formats = ComponentRegistry(default="text")
