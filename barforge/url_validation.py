"""Validation of web and GitHub URLs taken from registry data."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
_EDGE_CHARS = "".join(chr(code) for code in range(0x21))
_FORBIDDEN_HOST_CHARS = frozenset(" #%/:<>?@[\\]^|")
_SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})


class UrlValidationError(Exception):
    """Base class for URL validation failures."""


class InvalidUrlFormatError(UrlValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid URL format: {detail}")
        self.detail = detail


class DisallowedSchemeError(UrlValidationError):
    def __init__(self, scheme: str) -> None:
        super().__init__(f"URL scheme not allowed: {scheme}")
        self.scheme = scheme


class DisallowedDomainError(UrlValidationError):
    def __init__(self, domain: str) -> None:
        super().__init__(f"domain not allowed: {domain}")
        self.domain = domain


class InvalidGitHubPathError(UrlValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid GitHub URL path: {detail}")
        self.detail = detail


def _parse(url: str) -> SplitResult:
    text = re.sub(r"[\t\n\r]", "", url.strip(_EDGE_CHARS))
    if not _SCHEME_RE.match(text):
        raise InvalidUrlFormatError("relative URL without a base")
    parts = urlsplit(text)
    if parts.scheme in _SPECIAL_SCHEMES:
        host = parts.hostname
        if not host:
            raise InvalidUrlFormatError("empty host")
        if "[" not in parts.netloc and any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
            raise InvalidUrlFormatError("invalid domain character")
        try:
            parts.port
        except ValueError as exc:
            raise InvalidUrlFormatError("invalid port number") from exc
    return parts


def validate_web_url(url: str) -> None:
    """Raise unless url is a well-formed http or https URL."""
    scheme = _parse(url).scheme.lower()
    if scheme not in ("http", "https"):
        raise DisallowedSchemeError(scheme)


def validate_github_url(url: str) -> SplitResult:
    """Return the parsed URL if it is an https URL on github.com."""
    parts = _parse(url)
    scheme = parts.scheme.lower()
    if scheme != "https":
        raise DisallowedSchemeError(scheme)
    host = parts.hostname or ""
    if host != "github.com":
        raise DisallowedDomainError(host)
    return parts


def parse_github_url_safe(url: str) -> tuple[str, str]:
    """Return (owner, repository) from a validated GitHub URL."""
    parts = validate_github_url(url)
    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 2:
        raise InvalidGitHubPathError("URL must contain owner and repository")
    return segments[0], segments[1]