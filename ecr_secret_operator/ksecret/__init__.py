# ecr_secret_operator/ksecret/__init__.py

"""
Docker-registry secret lifecycle: content identity, drift and expiry checks,
and regeneration from a fetched ECR token.
"""

from .durations import format_duration, parse_duration, round_duration
from .materializer import (
    apply_regeneration,
    build_payload,
    render_docker_config,
    stamp_content_uid,
)
from .oracle import (
    NIL_UID,
    compute_content_uid,
    get_secret_uid,
    is_drifted,
    is_renewal_due,
    renewal_horizon,
)
from .record import (
    ANNOTATION_EXPIRES,
    ANNOTATION_LIFETIME,
    ANNOTATION_UID,
    DOCKER_CONFIG_JSON_KEY,
    SECRET_TYPE_DOCKER_CONFIG_JSON,
    ManagedSecretRecord,
    OwnerReference,
)

__all__ = [
    "ANNOTATION_EXPIRES",
    "ANNOTATION_LIFETIME",
    "ANNOTATION_UID",
    "DOCKER_CONFIG_JSON_KEY",
    "SECRET_TYPE_DOCKER_CONFIG_JSON",
    "ManagedSecretRecord",
    "OwnerReference",
    "NIL_UID",
    "compute_content_uid",
    "get_secret_uid",
    "is_drifted",
    "is_renewal_due",
    "renewal_horizon",
    "apply_regeneration",
    "build_payload",
    "render_docker_config",
    "stamp_content_uid",
    "format_duration",
    "parse_duration",
    "round_duration",
]
