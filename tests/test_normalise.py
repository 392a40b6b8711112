"""Tests for search token normalisation."""

import pytest

from doxygen_symbol_search.normalise import normalise_token


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("packArray", "packarray"),
        ("PACK", "pack"),
        ("~Halo", "halo"),
        ("operator()", "operator"),
        ("Cajita::Halo", "cajitahalo"),
        ("min_halo_width", "minhalowidth"),
        ("  pack  ", "pack"),
        ("", ""),
        ("::", ""),
    ],
)
def test_normalise_token(text: str, expected: str) -> None:
    """Test lowercasing and punctuation stripping."""
    assert normalise_token(text) == expected


def test_normalise_is_idempotent() -> None:
    """Test that normalising a token again leaves it unchanged."""
    token = normalise_token("particleGridMigrate")
    assert normalise_token(token) == token
