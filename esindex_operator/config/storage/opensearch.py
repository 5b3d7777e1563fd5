"""Search engine connection config (read from settings). Read-only; no business logic."""

from esindex_operator.config.settings import get_settings


def get_opensearch_config() -> dict:
    """Return engine client parameters from settings. The host and credentials come from the resolved URI."""
    s = get_settings()
    return {
        "verify_certs": s.engine_verify_certs,
        "timeout": s.engine_request_timeout,
    }
