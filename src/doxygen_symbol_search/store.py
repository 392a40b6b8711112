"""Immutable symbol index keyed by normalised search token."""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType

from doxygen_symbol_search.exceptions import MalformedIndex
from doxygen_symbol_search.models import IndexEntry, SymbolRecord
from doxygen_symbol_search.normalise import normalise_token

logger = logging.getLogger(__name__)


class IndexStore:
    """Read-only table mapping search tokens to ordered symbol records."""

    def __init__(self, entries: Iterable[IndexEntry]) -> None:
        """Build the store from index entries.

        The whole input is validated before the store becomes usable, so a
        failed construction leaves nothing behind.

        Args:
            entries: Index entries in documentation-build emission order.

        Raises:
            MalformedIndex: If an entry or record has the wrong type, a token is
                empty, not normalised or duplicated, or a record has an empty
                anchor.
        """
        table: dict[str, tuple[SymbolRecord, ...]] = {}
        for entry in entries:
            self._validate_entry(entry)
            if entry.token in table:
                msg = f"Duplicate search token: {entry.token!r}"
                raise MalformedIndex(msg)
            table[entry.token] = tuple(entry.records)

        self._table: Mapping[str, tuple[SymbolRecord, ...]] = MappingProxyType(table)
        self._sorted_tokens = tuple(sorted(table))
        logger.debug("Built index store with %d tokens", len(table))

    @classmethod
    def from_mapping(cls, table: Mapping[str, Sequence[SymbolRecord]]) -> "IndexStore":
        """Build a store from a deserialised token table.

        Args:
            table: Mapping of search token to ordered symbol records.

        Returns:
            IndexStore instance.
        """
        return cls(
            IndexEntry(token=token, records=tuple(records) if isinstance(records, list | tuple) else records)
            for token, records in table.items()
        )

    @staticmethod
    def _validate_entry(entry: IndexEntry) -> None:
        """Check a single entry against the index invariants.

        Args:
            entry: Entry to check.

        Raises:
            MalformedIndex: If the entry violates an invariant.
        """
        if not isinstance(entry, IndexEntry):
            msg = f"Expected an IndexEntry, got {type(entry).__name__}"
            raise MalformedIndex(msg)
        if not isinstance(entry.token, str):
            msg = f"Search token must be a string, got {type(entry.token).__name__}"
            raise MalformedIndex(msg)
        if not entry.token:
            msg = "Search token must not be empty"
            raise MalformedIndex(msg)
        if normalise_token(entry.token) != entry.token:
            msg = f"Search token is not normalised: {entry.token!r}"
            raise MalformedIndex(msg)
        if not isinstance(entry.records, list | tuple):
            msg = f"Records under token {entry.token!r} must be a sequence, got {type(entry.records).__name__}"
            raise MalformedIndex(msg)
        for record in entry.records:
            if not isinstance(record, SymbolRecord):
                msg = f"Token {entry.token!r} holds a {type(record).__name__}, not a SymbolRecord"
                raise MalformedIndex(msg)
            if not isinstance(record.anchor, str) or not record.anchor:
                msg = f"Record {record.qualified_name!r} under token {entry.token!r} has an empty anchor"
                raise MalformedIndex(msg)

    def lookup(self, token: str) -> tuple[SymbolRecord, ...]:
        """Return the records stored under an exact token.

        Args:
            token: Normalised search token.

        Returns:
            Records in emission order, or an empty tuple if absent.
        """
        return self._table.get(token, ())

    def tokens(self) -> tuple[str, ...]:
        """Return all tokens in ascending order."""
        return self._sorted_tokens

    def entries(self) -> Iterator[IndexEntry]:
        """Iterate over the entries in ascending token order."""
        for token in self._sorted_tokens:
            yield IndexEntry(token=token, records=self._table[token])

    def record_count(self) -> int:
        """Return the total number of symbol records across all tokens."""
        return sum(len(records) for records in self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, token: object) -> bool:
        return token in self._table
