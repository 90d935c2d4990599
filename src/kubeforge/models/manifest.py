"""Rendered output models."""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class WorkloadKind(Enum):
    """Kind of workload controller to emit."""
    DEPLOYMENT = "Deployment"
    STATEFULSET = "StatefulSet"


@dataclass
class SecretManifest:
    """A materialized Secret.

    ``data`` holds plain text values and ``binary_data`` holds values that are
    already base64-encoded. Both end up in the Secret's ``data`` field; text is
    only encoded when the manifest is serialized.
    """
    name: str
    namespace: str
    checksum_key: str
    data: Dict[str, str] = field(default_factory=dict)
    binary_data: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)

    def payload(self) -> Dict[str, Dict[str, str]]:
        """Logical content used for checksumming."""
        return {
            "data": dict(sorted(self.data.items())),
            "binaryData": dict(sorted(self.binary_data.items())),
        }

    def to_manifest(self) -> Dict[str, Any]:
        """Serialize to a Kubernetes Secret manifest."""
        data = {
            key: base64.b64encode(value.encode("utf-8")).decode("ascii")
            for key, value in sorted(self.data.items())
        }
        data.update(sorted(self.binary_data.items()))

        metadata: Dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.labels:
            metadata["labels"] = dict(self.labels)

        return {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": metadata,
            "type": "Opaque",
            "data": data,
        }


@dataclass
class RenderResult:
    """Everything produced by one compilation."""
    name: str
    namespace: str
    kind: WorkloadKind
    identifier: str
    checksum: str
    secrets: List[SecretManifest]
    workload: Dict[str, Any]
    service: Optional[Dict[str, Any]] = None
    wait_for_rollout: bool = True

    def outputs(self) -> Dict[str, Optional[str]]:
        """Summary for the calling orchestrator."""
        return {
            "namespace": self.namespace,
            "service_name": self.service["metadata"]["name"] if self.service else None,
            "deployment_name": self.name if self.kind == WorkloadKind.DEPLOYMENT else None,
            "statefulset_name": self.name if self.kind == WorkloadKind.STATEFULSET else None,
        }

    def manifests(self) -> List[Dict[str, Any]]:
        """All manifests in apply order: Secrets, workload, Service."""
        result = [secret.to_manifest() for secret in sorted(self.secrets, key=lambda s: s.name)]
        result.append(self.workload)
        if self.service:
            result.append(self.service)
        return result
