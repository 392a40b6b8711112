"""Search token normalisation shared by index construction and queries."""

import re

# Anything that is not a letter or digit, underscores included
_NON_ALNUM = re.compile(r"[\W_]+")


def normalise_token(text: str) -> str:
    """Normalise text into a search token.

    Args:
        text: Symbol label or user-typed query fragment.

    Returns:
        Lowercased text with punctuation and whitespace removed.
    """
    return _NON_ALNUM.sub("", text.lower())
