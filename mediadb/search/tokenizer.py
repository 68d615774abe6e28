"""
Search - Query Tokenizer

Pure helpers for the space-separated search query. Every token except the
last is committed; the last one is being edited and drives suggestions.
"""
import re
from typing import Iterable, List, Optional, Sequence
from urllib.parse import quote, unquote_plus

from mediadb.catalog.models import Tag

_WHITESPACE = re.compile(r"\s+")

SEPARATOR = " "
QUERY_SEPARATOR = "+"


def tokenize(text: str) -> List[str]:
    """
    Split on runs of whitespace, keeping leading/trailing empty tokens.

    "" -> [""], "cat " -> ["cat", ""], "cat dog" -> ["cat", "dog"]
    """
    return _WHITESPACE.split(text)


def committed_tokens(tokens: Sequence[str]) -> List[str]:
    """Non-empty tokens before the one being edited."""
    return [token for token in tokens[:-1] if token]


def filter_options(tokens: Sequence[str], catalog: Optional[Iterable[Tag]]) -> List[Tag]:
    """
    Suggestions for the last token.

    Case-insensitive substring match against the canonical name, skipping
    tags already committed earlier in the query. Catalog order is preserved.
    A catalog that is not loaded yet (None) yields no suggestions.
    """
    if catalog is None:
        return []
    needle = tokens[-1].lower() if tokens else ""
    used = set(tokens[:-1])
    return [
        tag for tag in catalog
        if needle in tag.canonical_name.lower() and tag.canonical_name not in used
    ]


def commit_token(tokens: Sequence[str], selected: Tag) -> str:
    """
    Replace the last token with ``selected`` and open a new empty token.

    Empty committed tokens are dropped so the result never contains two
    separators in a row; it always ends with a separator.
    """
    return SEPARATOR.join(committed_tokens(tokens) + [selected.canonical_name, ""])


def strip_trailing_empty(tokens: Sequence[str]) -> List[str]:
    """Drop a dangling empty last token, as left behind by commit_token."""
    tokens = list(tokens)
    if tokens and tokens[-1] == "":
        tokens = tokens[:-1]
    return tokens


def serialize_query(tokens: Sequence[str]) -> str:
    """Encode tokens for the ``q`` parameter: each token percent-quoted, joined with '+'."""
    return QUERY_SEPARATOR.join(quote(token, safe="") for token in tokens)


def parse_query(value: str) -> List[str]:
    """
    Inverse of serialize_query.

    An empty value is the single empty token, as tokenize("") gives; callers
    that want only committed terms drop empties themselves.
    """
    return [unquote_plus(token) for token in value.split(QUERY_SEPARATOR)]
