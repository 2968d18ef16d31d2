# ecr_secret_operator/api/__init__.py

"""
Custom resource definitions served by the operator.
"""

from .v1beta1 import (
    API_VERSION,
    GROUP,
    KIND,
    PLURAL,
    VERSION,
    ECRSecret,
    ECRSecretSpec,
    ECRSecretStatus,
    ObjectMeta,
    crd_manifest,
    parse_registry,
)

__all__ = [
    "API_VERSION",
    "GROUP",
    "KIND",
    "PLURAL",
    "VERSION",
    "ECRSecret",
    "ECRSecretSpec",
    "ECRSecretStatus",
    "ObjectMeta",
    "crd_manifest",
    "parse_registry",
]
