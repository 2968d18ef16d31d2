# ecr_secret_operator/controllers/store.py

"""
Cluster object store used by the reconciler and the renewal scanner.

Wraps the blocking Kubernetes client in coroutines and translates API errors
into the operator's persistence exceptions.
"""

import asyncio
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, Protocol

from kubernetes import client, config, watch
from kubernetes.client.rest import ApiException

from ..api.v1beta1 import GROUP, PLURAL, VERSION, ECRSecret
from ..core.clock import format_time
from ..core.exceptions import CacheNotStartedError, NotFoundError, PersistenceError
from ..ksecret.record import ManagedSecretRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectKey:
    """Namespace/name key identifying a declared resource."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class SecretStore(Protocol):
    """List/get/create/update access to the objects the operator manages."""

    async def get_ecr_secret(self, key: ObjectKey) -> ECRSecret: ...

    async def update_ecr_secret_status(
        self, ecr_secret: ECRSecret, last_updated: datetime
    ) -> None: ...

    async def list_namespaces(self) -> list[str]: ...

    async def list_secrets(self, namespace: str) -> list[ManagedSecretRecord]: ...

    async def get_secret(self, namespace: str, name: str) -> ManagedSecretRecord: ...

    async def create_secret(self, record: ManagedSecretRecord) -> None: ...

    async def update_secret(self, record: ManagedSecretRecord) -> None: ...


def translate_api_exception(e: ApiException, what: str) -> PersistenceError:
    """Map a Kubernetes API error onto the persistence exception hierarchy."""
    if e.status == 404:
        return NotFoundError(f"{what} not found", status=404, original_error=e)
    return PersistenceError(
        f"{what} failed: {e.status} {e.reason}", status=e.status, original_error=e
    )


class KubernetesStore:
    """SecretStore backed by the Kubernetes API server."""

    def __init__(self, kubeconfig: str | None = None) -> None:
        self.kubeconfig = kubeconfig
        self.core: client.CoreV1Api | None = None
        self.custom: client.CustomObjectsApi | None = None

    def start(self) -> None:
        """Load cluster configuration and create API clients."""
        if self.kubeconfig:
            config.load_kube_config(config_file=self.kubeconfig)
        else:
            # Try in-cluster config first, then fallback to default
            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()

        self.core = client.CoreV1Api()
        self.custom = client.CustomObjectsApi()
        logger.info("Kubernetes store started")

    @property
    def started(self) -> bool:
        return self.core is not None and self.custom is not None

    def _apis(self) -> tuple[client.CoreV1Api, client.CustomObjectsApi]:
        if self.core is None or self.custom is None:
            raise CacheNotStartedError("Kubernetes store has not been started")
        return self.core, self.custom

    async def _call(self, what: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except ApiException as e:
            raise translate_api_exception(e, what) from e

    async def get_ecr_secret(self, key: ObjectKey) -> ECRSecret:
        _, custom = self._apis()
        obj = await self._call(
            f"Get ECRSecret {key}",
            custom.get_namespaced_custom_object,
            GROUP,
            VERSION,
            key.namespace,
            PLURAL,
            key.name,
        )
        return ECRSecret.from_k8s(obj)

    async def update_ecr_secret_status(
        self, ecr_secret: ECRSecret, last_updated: datetime
    ) -> None:
        _, custom = self._apis()
        await self._call(
            f"Update ECRSecret status {ecr_secret.namespace}/{ecr_secret.name}",
            custom.patch_namespaced_custom_object_status,
            GROUP,
            VERSION,
            ecr_secret.namespace,
            PLURAL,
            ecr_secret.name,
            {"status": {"lastUpdated": format_time(last_updated)}},
        )

    async def list_namespaces(self) -> list[str]:
        core, _ = self._apis()
        result = await self._call("List namespaces", core.list_namespace)
        return [ns.metadata.name for ns in result.items]

    async def list_secrets(self, namespace: str) -> list[ManagedSecretRecord]:
        core, _ = self._apis()
        result = await self._call(
            f"List secrets in {namespace}", core.list_namespaced_secret, namespace
        )
        return [ManagedSecretRecord.from_k8s(secret) for secret in result.items]

    async def get_secret(self, namespace: str, name: str) -> ManagedSecretRecord:
        core, _ = self._apis()
        secret = await self._call(
            f"Get secret {namespace}/{name}",
            core.read_namespaced_secret,
            name,
            namespace,
        )
        return ManagedSecretRecord.from_k8s(secret)

    async def create_secret(self, record: ManagedSecretRecord) -> None:
        core, _ = self._apis()
        created = await self._call(
            f"Create secret {record.namespace}/{record.name}",
            core.create_namespaced_secret,
            record.namespace,
            record.to_k8s(),
        )
        record.resource_version = created.metadata.resource_version

    async def update_secret(self, record: ManagedSecretRecord) -> None:
        core, _ = self._apis()
        updated = await self._call(
            f"Update secret {record.namespace}/{record.name}",
            core.replace_namespaced_secret,
            record.name,
            record.namespace,
            record.to_k8s(),
        )
        record.resource_version = updated.metadata.resource_version

    def stream_ecr_secret_events(self, timeout_seconds: int = 300) -> Iterator[dict]:
        """Blocking watch over ECRSecrets in all namespaces."""
        _, custom = self._apis()
        w = watch.Watch()
        yield from w.stream(
            custom.list_cluster_custom_object,
            GROUP,
            VERSION,
            PLURAL,
            timeout_seconds=timeout_seconds,
        )

    def stream_secret_events(self, timeout_seconds: int = 300) -> Iterator[dict]:
        """Blocking watch over docker-registry secrets in all namespaces."""
        core, _ = self._apis()
        w = watch.Watch()
        yield from w.stream(
            core.list_secret_for_all_namespaces,
            field_selector="type=kubernetes.io/dockerconfigjson",
            timeout_seconds=timeout_seconds,
        )
