"""Incremental symbol search over an index store."""

from doxygen_symbol_search.exceptions import IndexUnavailable
from doxygen_symbol_search.models import MatchMode, SearchGroup, SymbolRecord
from doxygen_symbol_search.normalise import normalise_token
from doxygen_symbol_search.store import IndexStore


class QueryEngine:
    """Answers type-ahead queries against a read-only index store."""

    def __init__(self, store: IndexStore | None) -> None:
        """Initialise the engine with the store it searches.

        Args:
            store: Index store to search, or None if no index was loaded.
        """
        self.store = store

    @property
    def is_available(self) -> bool:
        """Whether an index store is attached."""
        return self.store is not None

    def search(
        self,
        fragment: str,
        mode: MatchMode = MatchMode.SUBSTRING,
        limit: int | None = None,
    ) -> list[SymbolRecord]:
        """Search for symbols whose token matches a typed fragment.

        Records from every matching token are concatenated, visiting tokens
        in ascending order and keeping emission order within each token.

        Args:
            fragment: Partial, case-insensitive symbol name.
            mode: Whether the fragment may occur anywhere in a token or only
                at its start.
            limit: Optional maximum number of records to return.

        Returns:
            List of matching SymbolRecord instances, empty when nothing matches
            or the fragment normalises to an empty string.

        Raises:
            IndexUnavailable: If no index store is attached.
            ValueError: If limit is negative.
        """
        if limit is not None and limit < 0:
            msg = f"limit must not be negative: {limit}"
            raise ValueError(msg)

        results: list[SymbolRecord] = []
        for group in self.search_groups(fragment, mode):
            results.extend(group.records)
            if limit is not None and len(results) >= limit:
                return results[:limit]
        return results

    def search_groups(self, fragment: str, mode: MatchMode = MatchMode.SUBSTRING) -> list[SearchGroup]:
        """Search for matching tokens, keeping records grouped per token.

        Args:
            fragment: Partial, case-insensitive symbol name.
            mode: Whether the fragment may occur anywhere in a token or only
                at its start.

        Returns:
            List of SearchGroup instances in ascending token order.

        Raises:
            IndexUnavailable: If no index store is attached.
        """
        store = self._require_store()
        needle = normalise_token(fragment)
        if not needle:
            return []

        groups = []
        for token in store.tokens():
            if self._matches(token, needle, mode):
                groups.append(SearchGroup(token=token, records=store.lookup(token)))
        return groups

    def _require_store(self) -> IndexStore:
        """Return the attached store.

        Returns:
            The attached IndexStore.

        Raises:
            IndexUnavailable: If no index store is attached.
        """
        if self.store is None:
            msg = "No symbol index is loaded; check the search data configuration"
            raise IndexUnavailable(msg)
        return self.store

    @staticmethod
    def _matches(token: str, needle: str, mode: MatchMode) -> bool:
        if mode is MatchMode.PREFIX:
            return token.startswith(needle)
        return needle in token
