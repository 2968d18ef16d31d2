# ecr_secret_operator/controllers/renewal.py

"""
Background sweep that finds docker-registry secrets approaching expiry and
queues their owning ECRSecrets for reconciliation.
"""

import asyncio
from datetime import datetime, timedelta
import logging

from ..api.v1beta1 import KIND
from ..core.clock import Clock, RealClock
from ..core.exceptions import (
    CacheNotStartedError,
    EcrSecretOperatorError,
    PersistenceError,
)
from ..core.logging import log_context
from ..ksecret.oracle import is_renewal_due
from ..ksecret.record import SECRET_TYPE_DOCKER_CONFIG_JSON, OwnerReference
from .store import ObjectKey, SecretStore

logger = logging.getLogger(__name__)


class RenewalScanner:
    """Periodically sweeps all namespaces for secrets that need renewal."""

    def __init__(
        self,
        store: SecretStore,
        queue: asyncio.Queue,
        max_age: timedelta,
        clock: Clock | None = None,
        interval: timedelta = timedelta(minutes=1),
        poll_interval: float = 0.5,
    ) -> None:
        self.store = store
        self.queue = queue
        self.max_age = max_age
        self.clock = clock or RealClock()
        self.interval = interval
        self.poll_interval = poll_interval
        self.next_run: datetime | None = None
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def start(self, stop_event: asyncio.Event) -> None:
        """
        Run sweeps until the stop event is set.

        Uses coarse polling against ``next_run`` rather than a precise timer;
        the first sweep runs immediately.
        """
        self.next_run = self.clock.now()
        logger.info(f"Renewal scanner started, interval {self.interval}")

        while not stop_event.is_set():
            if self.clock.now() >= self.next_run:
                try:
                    await self.poll_secrets()
                except Exception as e:
                    logger.error(f"Error polling secrets: {e}")
                self.next_run = self.clock.now() + self.interval

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.poll_interval)
            except TimeoutError:
                pass

        logger.info("Renewal scanner stopped")

    async def poll_secrets(self) -> bool:
        """
        Run one sweep unless another is already in progress.

        Returns:
            True if a sweep ran, False if it was skipped.
        """
        if self._lock.locked():
            logger.debug("Previous sweep still running, skipping")
            return False

        async with self._lock:
            await self._sweep()
        return True

    async def _sweep(self) -> None:
        logger.info("Polling for secrets that require renewal")

        try:
            namespaces = await self.store.list_namespaces()
        except CacheNotStartedError:
            logger.debug("Cluster cache not started yet, will retry next tick")
            return
        except PersistenceError as e:
            logger.error(f"Unable to list namespaces: {e}")
            raise

        queued = 0
        for namespace in namespaces:
            with log_context(namespace=namespace):
                queued += await self._sweep_namespace(namespace)

        logger.info(f"Poll complete, {queued} secret(s) queued for renewal")

    async def _sweep_namespace(self, namespace: str) -> int:
        try:
            secrets = await self.store.list_secrets(namespace)
        except PersistenceError as e:
            logger.error(f"Unable to list secrets: {e}")
            return 0

        queued = 0
        now = self.clock.now()
        for secret in secrets:
            with log_context(secret=secret.name):
                if secret.type != SECRET_TYPE_DOCKER_CONFIG_JSON:
                    continue

                if not is_renewal_due(secret, self.max_age, now):
                    continue

                logger.debug("Secret needs renewal")
                key = await self._resolve_owner(namespace, secret.controller_owner())
                if key is None:
                    continue

                await self.queue.put(key)
                queued += 1

        return queued

    async def _resolve_owner(
        self, namespace: str, owner: OwnerReference | None
    ) -> ObjectKey | None:
        if owner is None or owner.kind != KIND:
            logger.debug("Secret is not owned by an ECRSecret")
            return None

        key = ObjectKey(namespace=namespace, name=owner.name)
        try:
            await self.store.get_ecr_secret(key)
        except EcrSecretOperatorError as e:
            logger.error(f"Cannot get owning ECRSecret {owner.name}: {e}")
            return None
        return key
