"""Connection URI helpers."""

from urllib.parse import urlsplit, urlunsplit


def redact_uri(uri: str) -> str:
    """Strip user:password from a composed URI so it can be logged. Never raises."""
    try:
        parts = urlsplit(uri)
        if parts.username is None and parts.password is None:
            return uri
        host = parts.hostname or ""
        if parts.port is not None:
            host = f"{host}:{parts.port}"
    except ValueError:
        return "<unparseable uri>"
    return urlunsplit((parts.scheme, f"***@{host}", parts.path, parts.query, parts.fragment))
