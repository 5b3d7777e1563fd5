"""Custom resource coordinates (read from settings). Read-only; no business logic."""

from esindex_operator.config.settings import get_settings


def get_kubernetes_config() -> dict:
    """Return group/version/plural of the EsIndex and Binding resources for use by the store."""
    s = get_settings()
    return {
        "esindex": {
            "group": s.esindex_group,
            "version": s.esindex_version,
            "plural": s.esindex_plural,
        },
        "binding": {
            "group": s.binding_group,
            "version": s.binding_version,
            "plural": s.binding_plural,
        },
    }
