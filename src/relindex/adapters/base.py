"""Core extraction data types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class GrammarVariant:
    """Dialect flags selected from a file extension."""

    name: str
    typed: bool
    markup: bool


@dataclass(slots=True, frozen=True)
class ExportFacts:
    """Identifiers a module exports by declaration, plus the default-export flag."""

    named: tuple[str, ...] = ()
    default: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"named": list(self.named), "default": self.default}

    @classmethod
    def from_dict(cls, payload: object) -> ExportFacts | None:
        if not isinstance(payload, dict):
            return None
        named = _string_tuple(payload.get("named"))
        default = payload.get("default")
        if named is None or not isinstance(default, bool):
            return None
        return cls(named=named, default=default)


@dataclass(slots=True, frozen=True)
class ModuleFacts:
    """Raw import and export facts of one source file."""

    import_specifiers: tuple[str, ...] = ()
    dynamic_import_specifiers: tuple[str, ...] = ()
    exports: ExportFacts = ExportFacts()

    @property
    def all_specifiers(self) -> tuple[str, ...]:
        """Static then dynamic specifiers, in that order."""
        return self.import_specifiers + self.dynamic_import_specifiers


def _string_tuple(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return tuple(value)
