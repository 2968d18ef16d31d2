# ecr_secret_operator/controllers/__init__.py

"""
Controllers: the cluster store, the ECRSecret reconciler, the renewal scanner
and the manager that runs them together.
"""

from .manager import ControllerManager, ecr_secret_event_key, secret_event_key
from .reconciler import Reconciler, ReconcileResult, construct_secret
from .renewal import RenewalScanner
from .store import KubernetesStore, ObjectKey, SecretStore, translate_api_exception

__all__ = [
    "ControllerManager",
    "ecr_secret_event_key",
    "secret_event_key",
    "Reconciler",
    "ReconcileResult",
    "construct_secret",
    "RenewalScanner",
    "KubernetesStore",
    "ObjectKey",
    "SecretStore",
    "translate_api_exception",
]
