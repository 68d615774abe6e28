"""
Search - query tokenization shared by every autocomplete surface.
"""
from mediadb.search.tokenizer import (
    tokenize,
    committed_tokens,
    filter_options,
    commit_token,
    strip_trailing_empty,
    serialize_query,
    parse_query,
)

__all__ = [
    "tokenize",
    "committed_tokens",
    "filter_options",
    "commit_token",
    "strip_trailing_empty",
    "serialize_query",
    "parse_query",
]
