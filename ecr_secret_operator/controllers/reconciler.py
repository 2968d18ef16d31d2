# ecr_secret_operator/controllers/reconciler.py

"""
Reconciles an ECRSecret against the docker-registry secret it owns.
"""

from collections.abc import Callable
from datetime import timedelta
from enum import Enum
import logging
from pathlib import Path

from ..api.v1beta1 import ECRSecret
from ..aws.ecr import ECRAuthentication
from ..config.credentials import load_credentials_file
from ..config.errors import ConfigError
from ..core.clock import Clock, RealClock
from ..core.exceptions import FatalConfigurationError, NotFoundError, PersistenceError
from ..core.exceptions import ValidationError as ResourceValidationError
from ..core.logging import log_context
from ..ksecret.materializer import apply_regeneration, build_payload, stamp_content_uid
from ..ksecret.oracle import is_drifted, is_renewal_due
from ..ksecret.record import SECRET_TYPE_DOCKER_CONFIG_JSON, ManagedSecretRecord
from .store import ObjectKey, SecretStore

logger = logging.getLogger(__name__)


class ReconcileResult(str, Enum):
    """Outcome of one reconcile call."""

    CREATED = "created"
    UPDATED = "updated"
    NOOP = "noop"


async def construct_secret(
    owner: ECRSecret, source: ECRAuthentication, clock: Clock
) -> ManagedSecretRecord:
    """Build a new docker-registry secret owned by the given ECRSecret."""
    annotations, payload = await build_payload(source, clock)

    record = ManagedSecretRecord(
        name=owner.kube_secret_name(),
        namespace=owner.namespace,
        payload=payload,
        annotations=annotations,
        owner_references=[owner.owner_reference()],
        type=SECRET_TYPE_DOCKER_CONFIG_JSON,
    )
    stamp_content_uid(record)
    return record


class Reconciler:
    """Creates or regenerates the docker-registry secret for an ECRSecret."""

    def __init__(
        self,
        store: SecretStore,
        source_factory: Callable[[], ECRAuthentication],
        config_file: str | Path,
        max_age: timedelta,
        clock: Clock | None = None,
    ) -> None:
        self.store = store
        self.source_factory = source_factory
        self.config_file = config_file
        self.max_age = max_age
        self.clock = clock or RealClock()

    async def reconcile(self, key: ObjectKey) -> ReconcileResult:
        """
        Bring the secret owned by ``key`` to its desired state.

        Raises:
            FatalConfigurationError: If credentials for the account cannot be loaded.
            CredentialSourceError: If the credential source fails.
            PersistenceError: On any cluster read/write failure other than not-found.
        """
        with log_context(ecrsecret=str(key)):
            logger.debug("Begin reconcile")

            try:
                ecr_secret = await self.store.get_ecr_secret(key)
            except NotFoundError:
                logger.info("Unable to fetch ECRSecret - probably just deleted.")
                return ReconcileResult.NOOP
            except ResourceValidationError as e:
                logger.error(f"ECRSecret is invalid, ignoring: {e}")
                return ReconcileResult.NOOP

            try:
                account_id, region = ecr_secret.account_id, ecr_secret.region
            except ResourceValidationError as e:
                logger.error(f"ECRSecret has an unusable registry, ignoring: {e}")
                return ReconcileResult.NOOP

            logger.debug(f"Read ECRSecret for account {account_id} in {region}")

            try:
                credentials = load_credentials_file(self.config_file, account_id)
            except ConfigError as e:
                logger.critical(str(e))
                raise FatalConfigurationError(e.message, original_error=e) from e

            logger.debug(
                f"Loaded AWS credentials for account {account_id}, "
                f"access key {credentials.access_key_id}"
            )

            source = self.source_factory()
            await source.configure(credentials, region)

            secret_name = ecr_secret.kube_secret_name()
            try:
                found = await self.store.get_secret(ecr_secret.namespace, secret_name)
            except NotFoundError:
                return await self._create(ecr_secret, source)

            return await self._refresh(ecr_secret, found, source)

    async def _create(
        self, ecr_secret: ECRSecret, source: ECRAuthentication
    ) -> ReconcileResult:
        logger.debug(f"Creating new docker-registry secret {ecr_secret.kube_secret_name()}")
        record = await construct_secret(ecr_secret, source, self.clock)

        try:
            await self.store.create_secret(record)
        except PersistenceError as e:
            logger.error(f"Unable to create secret for ECRSecret {ecr_secret.name}: {e}")
            raise

        logger.info(
            f"Created new docker-registry secret {record.name} "
            f"uuid={record.content_uid}"
        )
        await self._mark_updated(ecr_secret)
        return ReconcileResult.CREATED

    async def _refresh(
        self,
        ecr_secret: ECRSecret,
        found: ManagedSecretRecord,
        source: ECRAuthentication,
    ) -> ReconcileResult:
        drifted = is_drifted(found)
        if not drifted and not is_renewal_due(found, self.max_age, self.clock.now()):
            logger.debug(f"Secret {found.name} is up to date")
            return ReconcileResult.NOOP

        reason = "drifted" if drifted else "due for renewal"
        await apply_regeneration(found, source, self.clock)
        logger.info(f"Updating secret {found.name} ({reason})")
        await self.store.update_secret(found)
        await self._mark_updated(ecr_secret)
        return ReconcileResult.UPDATED

    async def _mark_updated(self, ecr_secret: ECRSecret) -> None:
        try:
            await self.store.update_ecr_secret_status(ecr_secret, self.clock.now())
        except PersistenceError as e:
            logger.warning(f"Unable to update ECRSecret status: {e}")
