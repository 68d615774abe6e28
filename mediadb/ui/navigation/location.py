"""
Address-bar location value.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit


@dataclass(frozen=True)
class Location:
    """Path plus raw query string, e.g. Location("/media", "q=cat+dog")."""
    pathname: str = "/"
    search: str = ""

    @classmethod
    def parse(cls, url: str) -> "Location":
        parts = urlsplit(url)
        return cls(pathname=parts.path or "/", search=parts.query)

    def query_param(self, name: str) -> Optional[str]:
        """First value of ``name`` with standard query-string decoding, or None."""
        values = parse_qs(self.search, keep_blank_values=True).get(name)
        return values[0] if values else None

    @property
    def url(self) -> str:
        return f"{self.pathname}?{self.search}" if self.search else self.pathname

    def __str__(self) -> str:
        return self.url
