# ecr_secret_operator/ksecret/record.py

"""
In-memory representation of a materialized docker-registry secret.

The Kubernetes API carries secret data base64 encoded; records keep the raw
payload bytes so that content hashing always works on what the registry client
will actually read.
"""

import base64
from dataclasses import dataclass, field
from typing import Any

from kubernetes import client

ANNOTATION_UID = "secrets.fireflycons.io/uuid"
ANNOTATION_EXPIRES = "secrets.fireflycons.io/expires"
ANNOTATION_LIFETIME = "secrets.fireflycons.io/validity"

SECRET_TYPE_DOCKER_CONFIG_JSON = "kubernetes.io/dockerconfigjson"
DOCKER_CONFIG_JSON_KEY = ".dockerconfigjson"


@dataclass
class OwnerReference:
    """Back-reference from a secret to the object that produced it."""

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = False
    block_owner_deletion: bool = False

    @classmethod
    def from_k8s(cls, ref: client.V1OwnerReference) -> "OwnerReference":
        return cls(
            api_version=ref.api_version,
            kind=ref.kind,
            name=ref.name,
            uid=ref.uid,
            controller=bool(ref.controller),
            block_owner_deletion=bool(ref.block_owner_deletion),
        )

    def to_k8s(self) -> client.V1OwnerReference:
        return client.V1OwnerReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.name,
            uid=self.uid,
            controller=self.controller,
            block_owner_deletion=self.block_owner_deletion,
        )


@dataclass
class ManagedSecretRecord:
    """A docker-registry secret as seen by the lifecycle engine."""

    name: str
    namespace: str
    payload: bytes | None = None
    annotations: dict[str, str] = field(default_factory=dict)
    owner_references: list[OwnerReference] = field(default_factory=list)
    type: str = SECRET_TYPE_DOCKER_CONFIG_JSON
    resource_version: str | None = None
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def expires(self) -> str | None:
        return self.annotations.get(ANNOTATION_EXPIRES)

    @property
    def lifetime(self) -> str | None:
        return self.annotations.get(ANNOTATION_LIFETIME)

    @property
    def content_uid(self) -> str | None:
        return self.annotations.get(ANNOTATION_UID)

    def controller_owner(self) -> OwnerReference | None:
        """Return the controlling owner, falling back to the first owner."""
        for ref in self.owner_references:
            if ref.controller:
                return ref
        return self.owner_references[0] if self.owner_references else None

    @classmethod
    def from_k8s(cls, secret: client.V1Secret) -> "ManagedSecretRecord":
        """Build a record from a Kubernetes secret, decoding the payload."""
        metadata = secret.metadata or client.V1ObjectMeta()
        data = secret.data or {}

        payload = None
        encoded = data.get(DOCKER_CONFIG_JSON_KEY)
        if encoded is not None:
            payload = base64.b64decode(encoded)

        return cls(
            name=metadata.name,
            namespace=metadata.namespace,
            payload=payload,
            annotations=dict(metadata.annotations or {}),
            owner_references=[
                OwnerReference.from_k8s(ref) for ref in metadata.owner_references or []
            ],
            type=secret.type or "Opaque",
            resource_version=metadata.resource_version,
            labels=dict(metadata.labels or {}),
        )

    def to_k8s(self) -> client.V1Secret:
        """Render the record as a Kubernetes secret, encoding the payload."""
        data: dict[str, Any] = {}
        if self.payload is not None:
            data[DOCKER_CONFIG_JSON_KEY] = base64.b64encode(self.payload).decode("ascii")

        return client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=client.V1ObjectMeta(
                name=self.name,
                namespace=self.namespace,
                annotations=dict(self.annotations),
                labels=dict(self.labels) or None,
                owner_references=[ref.to_k8s() for ref in self.owner_references] or None,
                resource_version=self.resource_version,
            ),
            type=self.type,
            data=data,
        )
