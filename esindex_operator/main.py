"""Operator entry: config, logging, Kubernetes client, and graceful shutdown."""

import logging
from typing import Any

import kopf

from esindex_operator.config.logging import configure_logging, get_logger
from esindex_operator.config.settings import get_settings
from esindex_operator.controllers.handlers import esindex as esindex_handlers  # noqa: F401  registers handlers
from esindex_operator.resources.kubernetes.client import load_kubernetes_config
from esindex_operator.resources.opensearch.client import close_engine_clients

logger = get_logger(__name__)


@kopf.on.startup()
def startup(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Startup: logging, cluster config, and kopf execution settings."""
    app_settings = get_settings()
    configure_logging()
    logger.info(
        "Operator starting",
        extra={"app_name": app_settings.app_name, "resource": app_settings.esindex_plural},
    )
    load_kubernetes_config()

    # Keep kopf's bookkeeping out of status, which holds only state/message/generation
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(prefix=app_settings.esindex_group)
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(prefix=app_settings.esindex_group)
    settings.execution.max_workers = app_settings.max_workers
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
def cleanup(**_: Any) -> None:
    """Shutdown: close pooled search engine clients."""
    logger.info("Operator shutting down")
    close_engine_clients()
    logger.info("Shutdown complete")


def main() -> None:
    kopf.run(clusterwide=True)


if __name__ == "__main__":
    main()
