"""Data models for the documentation symbol index."""

from dataclasses import dataclass
from enum import Enum


class MatchMode(Enum):
    """How a query fragment is compared against search tokens."""

    SUBSTRING = "substring"
    PREFIX = "prefix"


@dataclass(frozen=True)
class SymbolRecord:
    """One documented symbol occurrence."""

    label: str
    scope: str
    anchor: str
    signature: str | None = None
    external: bool = False

    @property
    def qualified_name(self) -> str:
        """Return the label prefixed with its declaring scope.

        Returns:
            ``scope::label``, or just the label for free symbols.
        """
        if self.scope:
            return f"{self.scope}::{self.label}"
        return self.label


@dataclass(frozen=True)
class IndexEntry:
    """A search token and the records emitted under it."""

    token: str
    records: tuple[SymbolRecord, ...]


@dataclass(frozen=True)
class SearchGroup:
    """Records of a single matching token, as rendered by a dropdown."""

    token: str
    records: tuple[SymbolRecord, ...]
