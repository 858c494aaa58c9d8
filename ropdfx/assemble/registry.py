"""Registry of the document kinds the assembler can produce."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional, Type

if TYPE_CHECKING:  # pragma: no cover
    from .base import DocumentAssembler


class DocumentRegistry:
    """Registry storing the available document assemblers by kind."""

    def __init__(self) -> None:
        self._kinds: Dict[str, Type["DocumentAssembler"]] = {}

    def register(self, kind: str, assembler_class: Type["DocumentAssembler"]) -> None:
        if kind in self._kinds:
            raise ValueError(f"Document kind '{kind}' is already registered")
        self._kinds[kind] = assembler_class

    def get(self, kind: str) -> Optional[Type["DocumentAssembler"]]:
        return self._kinds.get(kind)

    def resolve(self, kind: str) -> Type["DocumentAssembler"]:
        try:
            return self._kinds[kind]
        except KeyError as exc:
            raise KeyError(f"Unknown document kind '{kind}'. Choose from: {', '.join(self.kinds())}") from exc

    def kinds(self) -> Iterable[str]:
        return sorted(self._kinds.keys())


registry = DocumentRegistry()


def register_document(kind: str):
    def decorator(cls: Type["DocumentAssembler"]) -> Type["DocumentAssembler"]:
        cls.kind = kind
        registry.register(kind, cls)
        return cls

    return decorator


__all__ = ["DocumentRegistry", "registry", "register_document"]
