"""Loader that builds index stores from a Doxygen ``search/`` directory."""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from doxygen_symbol_search.exceptions import IndexUnavailable
from doxygen_symbol_search.models import IndexEntry
from doxygen_symbol_search.parser import SearchDataParser, merge_entries
from doxygen_symbol_search.store import IndexStore

logger = logging.getLogger(__name__)

_DATA_FILE = re.compile(r"^(?P<category>[a-z]+)_(?P<part>[0-9a-f]+)\.js$")


class SearchIndexLoader:
    """Loads Doxygen search data files into immutable index stores."""

    DEFAULT_CATEGORY = "functions"
    KNOWN_CATEGORIES = (
        "all",
        "classes",
        "defines",
        "enums",
        "enumvalues",
        "files",
        "functions",
        "groups",
        "namespaces",
        "pages",
        "related",
        "typedefs",
        "variables",
    )

    def __init__(self, parser: SearchDataParser | None = None) -> None:
        """Initialise loader with a search data parser.

        Args:
            parser: Parser for individual files, a default one if omitted.
        """
        self.parser = parser or SearchDataParser()

    def load_directory(self, search_dir: Path, category: str = DEFAULT_CATEGORY) -> IndexStore:
        """Build a store from every data file of one category.

        Args:
            search_dir: Doxygen ``search/`` output directory.
            category: Index category, e.g. ``functions`` or ``classes``.

        Returns:
            IndexStore holding all tokens of the category.

        Raises:
            ValueError: If the category is not a Doxygen index category.
            IndexUnavailable: If the directory or its data files are missing.
            MalformedIndex: If any data file is malformed.
        """
        if category not in self.KNOWN_CATEGORIES:
            msg = f"Unknown search index category: {category!r}"
            raise ValueError(msg)

        data_files = self._find_data_files(search_dir, category)
        logger.info("Found %d search data files for %s", len(data_files), category)
        return self._build_store(data_files)

    def load_file(self, file_path: Path) -> IndexStore:
        """Build a store from a single search data file.

        Args:
            file_path: Path to the ``.js`` file.

        Returns:
            IndexStore holding the file's tokens.

        Raises:
            IndexUnavailable: If the file does not exist.
            MalformedIndex: If the file is malformed.
        """
        if not file_path.is_file():
            msg = f"Search data file does not exist: {file_path}"
            logger.warning(msg)
            raise IndexUnavailable(msg)
        return self._build_store([file_path])

    def load_categories(self, search_dir: Path, categories: Iterable[str]) -> dict[str, IndexStore]:
        """Build one store per category.

        Args:
            search_dir: Doxygen ``search/`` output directory.
            categories: Category names to load.

        Returns:
            Mapping of category name to IndexStore.
        """
        return {category: self.load_directory(search_dir, category) for category in categories}

    def available_categories(self, search_dir: Path) -> list[str]:
        """List categories that have at least one data file.

        Args:
            search_dir: Doxygen ``search/`` output directory.

        Returns:
            Sorted category names.

        Raises:
            IndexUnavailable: If the directory does not exist.
        """
        self._require_directory(search_dir)
        categories = set()
        for file_path in search_dir.iterdir():
            match = _DATA_FILE.match(file_path.name)
            if match and match.group("category") in self.KNOWN_CATEGORIES and file_path.is_file():
                categories.add(match.group("category"))
        return sorted(categories)

    def _find_data_files(self, search_dir: Path, category: str) -> list[Path]:
        """Find a category's data files ordered by their hex part number.

        Args:
            search_dir: Doxygen ``search/`` output directory.
            category: Index category.

        Returns:
            Data file paths in part order.

        Raises:
            IndexUnavailable: If the directory or its data files are missing.
        """
        self._require_directory(search_dir)

        parts: list[tuple[int, Path]] = []
        for file_path in search_dir.glob(f"{category}_*.js"):
            match = _DATA_FILE.match(file_path.name)
            if match and match.group("category") == category:
                parts.append((int(match.group("part"), 16), file_path))

        if not parts:
            msg = f"No search data files for category {category!r} in {search_dir}"
            logger.warning(msg)
            raise IndexUnavailable(msg)

        return [file_path for _, file_path in sorted(parts)]

    @staticmethod
    def _require_directory(search_dir: Path) -> None:
        if not search_dir.is_dir():
            msg = f"Search data directory does not exist: {search_dir}"
            logger.warning(msg)
            raise IndexUnavailable(msg)

    def _build_store(self, data_files: list[Path]) -> IndexStore:
        """Parse data files in order and build a single store.

        Args:
            data_files: Data files in emission order.

        Returns:
            IndexStore built from the merged entries.
        """
        entries: list[IndexEntry] = []
        for file_path in data_files:
            parsed = self.parser.parse_file(file_path)
            logger.debug("Parsed %d tokens from %s", len(parsed), file_path.name)
            entries.extend(parsed)

        merged = merge_entries(entries)
        if len(merged) != len(entries):
            logger.debug("Merged %d repeated tokens across files", len(entries) - len(merged))

        store = IndexStore(merged)
        logger.info("Loaded %d tokens (%d records)", len(store), store.record_count())
        return store
