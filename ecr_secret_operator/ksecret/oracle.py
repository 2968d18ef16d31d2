# ecr_secret_operator/ksecret/oracle.py

"""
Drift and expiry classification for managed docker-registry secrets.

Everything here is a pure function of a record (plus the supplied time) and
never raises: malformed annotations are classified, not reported as errors.
"""

from datetime import datetime, timedelta
import hashlib
import logging
import uuid

from ..core.clock import parse_time
from .durations import parse_duration
from .record import ManagedSecretRecord

logger = logging.getLogger(__name__)

NIL_UID = uuid.UUID(int=0)


def compute_content_uid(
    payload: bytes | None, expires: str | None, lifetime: str | None
) -> uuid.UUID:
    """
    Derive the content UID from the three fields that define a secret.

    Returns:
        The md5 digest of payload + expires + lifetime as a UUID, or
        ``NIL_UID`` when any of the three is missing.
    """
    if payload is None or expires is None or lifetime is None:
        return NIL_UID

    digest = hashlib.md5(
        payload + expires.encode("utf-8") + lifetime.encode("utf-8"),
        usedforsecurity=False,
    ).digest()
    return uuid.UUID(bytes=digest)


def get_secret_uid(record: ManagedSecretRecord) -> uuid.UUID:
    """Content UID recomputed from the record's current fields."""
    return compute_content_uid(record.payload, record.expires, record.lifetime)


def is_drifted(record: ManagedSecretRecord) -> bool:
    """Check whether the recorded UID no longer matches the record's content."""
    actual = get_secret_uid(record)
    if actual == NIL_UID:
        # At least one required field is missing
        return True

    stated = record.content_uid
    if stated is None:
        return True

    try:
        stated_uid = uuid.UUID(stated)
    except (ValueError, TypeError, AttributeError):
        return True

    return stated_uid != actual


def renewal_horizon(
    expires: datetime, lifetime: timedelta, max_age: timedelta
) -> datetime:
    """The instant after which a secret must be regenerated."""
    return expires + (max_age - lifetime)


def is_renewal_due(
    record: ManagedSecretRecord, max_age: timedelta, now: datetime
) -> bool:
    """
    Check whether a secret has passed its renewal horizon.

    Secrets without the expires annotation are not managed here and are never
    due. Secrets without an owner are left alone. Unparsable expiry or validity
    annotations make the secret due.
    """
    expires = record.expires
    if expires is None:
        return False

    if not record.owner_references:
        return False

    try:
        expire_time = parse_time(expires)
    except (ValueError, TypeError):
        logger.warning(
            f"Secret {record.namespace}/{record.name} has malformed expires "
            f"annotation '{expires}', scheduling renewal"
        )
        return True

    lifetime = record.lifetime
    if lifetime is None:
        logger.warning(
            f"Secret {record.namespace}/{record.name} has no validity annotation, "
            "scheduling renewal"
        )
        return True

    try:
        validity = parse_duration(lifetime)
    except ValueError:
        logger.warning(
            f"Secret {record.namespace}/{record.name} has malformed validity "
            f"annotation '{lifetime}', scheduling renewal"
        )
        return True

    try:
        return now > renewal_horizon(expire_time, validity, max_age)
    except (OverflowError, TypeError):
        logger.warning(
            f"Secret {record.namespace}/{record.name} has an out of range renewal "
            "horizon, scheduling renewal"
        )
        return True
