# ecr_secret_operator/ksecret/materializer.py

"""
Builds docker-registry secret content from a freshly fetched ECR token.
"""

from datetime import timedelta
import json
import logging

from ..aws.ecr import ECRAuthentication
from ..core.clock import Clock, format_time
from .durations import format_duration, round_duration
from .oracle import NIL_UID, get_secret_uid
from .record import (
    ANNOTATION_EXPIRES,
    ANNOTATION_LIFETIME,
    ANNOTATION_UID,
    ManagedSecretRecord,
)

logger = logging.getLogger(__name__)


def render_docker_config(proxy_endpoint: str, authorization_token: str) -> bytes:
    """Render the registry-auth document for one endpoint."""
    document = {"auths": {proxy_endpoint: {"auth": authorization_token}}}
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


async def build_payload(
    source: ECRAuthentication, clock: Clock
) -> tuple[dict[str, str], bytes]:
    """
    Fetch a token and build the annotations and payload for a secret.

    The UID annotation is a nil placeholder; callers stamp the real value once
    the record's content is in place. Errors from the source propagate as-is.

    Returns:
        Tuple of (annotations, payload bytes)
    """
    auth = await source.fetch_token()

    validity = round_duration(auth.expires_at - clock.now(), timedelta(minutes=1))

    annotations = {
        ANNOTATION_EXPIRES: format_time(auth.expires_at),
        ANNOTATION_UID: str(NIL_UID),
        ANNOTATION_LIFETIME: format_duration(validity),
    }

    # Not base64 encoded here; that happens when the record is sent to the API server
    payload = render_docker_config(auth.proxy_endpoint, auth.authorization_token)

    return annotations, payload


def stamp_content_uid(record: ManagedSecretRecord) -> str:
    """Compute the content UID from the record's settled fields and record it."""
    uid = str(get_secret_uid(record))
    record.annotations[ANNOTATION_UID] = uid
    return uid


async def apply_regeneration(
    record: ManagedSecretRecord, source: ECRAuthentication, clock: Clock
) -> None:
    """
    Replace the record's content with a freshly fetched token.

    The record is left untouched if the source fails.
    """
    annotations, payload = await build_payload(source, clock)

    record.annotations = annotations
    record.payload = payload
    uid = stamp_content_uid(record)

    logger.debug(f"Regenerated secret {record.namespace}/{record.name} with uid {uid}")
