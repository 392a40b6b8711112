"""Parser for Doxygen ``searchData`` JavaScript index files."""

import ast
import html
import re
from collections.abc import Iterable
from pathlib import Path

from doxygen_symbol_search.exceptions import MalformedIndex
from doxygen_symbol_search.models import IndexEntry, SymbolRecord
from doxygen_symbol_search.normalise import normalise_token


def merge_entries(entries: Iterable[IndexEntry]) -> list[IndexEntry]:
    """Merge entries sharing a token, preserving emission order.

    Args:
        entries: Entries in emission order, possibly with repeated tokens.

    Returns:
        One entry per token, ordered by first appearance.
    """
    merged: dict[str, list[SymbolRecord]] = {}
    for entry in entries:
        merged.setdefault(entry.token, []).extend(entry.records)
    return [IndexEntry(token=token, records=tuple(records)) for token, records in merged.items()]


class SearchDataParser:
    """Parses the ``var searchData=[...]`` files Doxygen writes under ``search/``."""

    SEARCH_DATA_PATTERN = re.compile(r"var\s+searchData\s*=\s*(\[.*\])\s*;?\s*$", re.DOTALL)

    def parse_file(self, file_path: Path) -> list[IndexEntry]:
        """Parse a search data file.

        Args:
            file_path: Path to the ``.js`` file.

        Returns:
            List of IndexEntry instances in emission order.

        Raises:
            MalformedIndex: If the file is not valid search data.
        """
        try:
            source = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"{file_path}: search data is not valid UTF-8"
            raise MalformedIndex(msg) from exc
        return self.parse_text(source, source_name=str(file_path))

    def parse_text(self, source: str, source_name: str = "<string>") -> list[IndexEntry]:
        """Parse search data source text.

        Args:
            source: Contents of a search data file.
            source_name: Name used in error messages.

        Returns:
            List of IndexEntry instances in emission order.

        Raises:
            MalformedIndex: If the text is not valid search data.
        """
        match = self.SEARCH_DATA_PATTERN.search(source)
        if not match:
            msg = f"{source_name}: no searchData array found"
            raise MalformedIndex(msg)

        data = self._decode_literal(match.group(1), source_name)
        if not isinstance(data, list):
            msg = f"{source_name}: searchData is not an array"
            raise MalformedIndex(msg)

        return merge_entries(self._build_entry(element, source_name) for element in data)

    @staticmethod
    def _decode_literal(literal: str, source_name: str) -> object:
        """Decode the searchData array literal.

        Doxygen writes single-quoted string, integer and array literals only,
        which read the same as Python literals.

        Args:
            literal: Array literal text.
            source_name: Name used in error messages.

        Returns:
            Decoded value.

        Raises:
            MalformedIndex: If the literal cannot be decoded.
        """
        try:
            return ast.literal_eval(literal)
        except (SyntaxError, ValueError, MemoryError, RecursionError) as exc:
            msg = f"{source_name}: searchData array is not a valid literal: {exc}"
            raise MalformedIndex(msg) from exc

    def _build_entry(self, element: object, source_name: str) -> IndexEntry:
        """Convert one ``[id, [label, child, ...]]`` element into an IndexEntry.

        Args:
            element: Decoded array element.
            source_name: Name used in error messages.

        Returns:
            IndexEntry for the element's label.

        Raises:
            MalformedIndex: If the element does not have the expected shape.
        """
        if not (
            isinstance(element, list)
            and len(element) == 2  # noqa: PLR2004
            and isinstance(element[0], str)
            and isinstance(element[1], list)
            and len(element[1]) >= 2  # noqa: PLR2004
            and isinstance(element[1][0], str)
        ):
            msg = f"{source_name}: malformed searchData element {element!r}"
            raise MalformedIndex(msg)

        label = html.unescape(element[1][0])
        token = normalise_token(label)
        if not token:
            msg = f"{source_name}: label {label!r} has no searchable characters"
            raise MalformedIndex(msg)

        children = element[1][1:]
        single = len(children) == 1
        records = tuple(self._build_record(label, child, single, source_name) for child in children)
        return IndexEntry(token=token, records=records)

    def _build_record(self, label: str, child: object, single: bool, source_name: str) -> SymbolRecord:
        """Convert one ``[url, flag, text]`` child into a SymbolRecord.

        A lone child carries the declaring scope as its text. When a label has
        several children each text is the qualified name plus signature.

        Args:
            label: Display label of the owning element.
            child: Decoded child array.
            single: Whether this is the element's only child.
            source_name: Name used in error messages.

        Returns:
            SymbolRecord instance.

        Raises:
            MalformedIndex: If the child does not have the expected shape.
        """
        if not (
            isinstance(child, list)
            and len(child) == 3  # noqa: PLR2004
            and isinstance(child[0], str)
            and isinstance(child[1], int)
            and isinstance(child[2], str)
        ):
            msg = f"{source_name}: malformed result for {label!r}: {child!r}"
            raise MalformedIndex(msg)

        anchor, flag, text = child
        if not anchor:
            msg = f"{source_name}: result for {label!r} has an empty url"
            raise MalformedIndex(msg)

        text = html.unescape(text)
        if single:
            scope, signature = text, None
        else:
            scope, signature = self._split_qualified(text, label)

        return SymbolRecord(
            label=label,
            scope=scope,
            anchor=anchor,
            signature=signature,
            external=flag == 0,
        )

    @staticmethod
    def _split_qualified(text: str, label: str) -> tuple[str, str | None]:
        """Split ``Scope::label(args)`` into scope and signature.

        Args:
            text: Qualified name, optionally followed by a parameter list.
            label: Symbol label to locate inside the text.

        Returns:
            Tuple of scope and signature (None when no parameter list).
        """
        if text.startswith(label):
            rest = text[len(label) :]
            if not rest or rest.startswith("("):
                return "", rest or None

        marker = f"::{label}"
        start = text.find(marker)
        while start != -1:
            rest = text[start + len(marker) :]
            if not rest or rest.startswith("("):
                return text[:start], rest or None
            start = text.find(marker, start + 1)

        # Label not found, treat the whole text as scope
        return text, None
