"""Kubernetes API clients: cluster config loading and shared API instances."""

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from esindex_operator.config.logging import get_logger

logger = get_logger(__name__)

_core_api: client.CoreV1Api | None = None
_custom_objects_api: client.CustomObjectsApi | None = None


def load_kubernetes_config() -> None:
    """Load in-cluster config, falling back to the local kubeconfig for development."""
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except ConfigException:
        config.load_kube_config()
        logger.info("Loaded kubeconfig")


def get_core_api() -> client.CoreV1Api:
    """Return the shared CoreV1Api (secrets, config maps). Creates it on first use."""
    global _core_api
    if _core_api is None:
        _core_api = client.CoreV1Api()
    return _core_api


def get_custom_objects_api() -> client.CustomObjectsApi:
    """Return the shared CustomObjectsApi (EsIndex, Binding). Creates it on first use."""
    global _custom_objects_api
    if _custom_objects_api is None:
        _custom_objects_api = client.CustomObjectsApi()
    return _custom_objects_api
