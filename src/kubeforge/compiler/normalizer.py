"""Input normalization: resolve defaults and cross-container invariants."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from kubeforge.compiler.errors import ManifestError
from kubeforge.models.manifest import WorkloadKind
from kubeforge.models.workload import ContainerSpec, WorkloadSpec


logger = logging.getLogger(__name__)

KIND_ANNOTATION = "k8s.score.dev/kind"


@dataclass
class NormalizedWorkload:
    """Workload spec with every derived default resolved."""
    spec: WorkloadSpec
    kind: WorkloadKind
    pod_annotations: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def namespace(self) -> str:
        return self.spec.namespace

    @property
    def containers(self) -> List[Tuple[str, ContainerSpec]]:
        """Containers in stable (key) order."""
        return sorted(self.spec.containers.items())


def resolve_kind(annotations: Dict[str, str]) -> WorkloadKind:
    """Pick the workload kind from the kind annotation."""
    value = annotations.get(KIND_ANNOTATION)
    if value is None:
        return WorkloadKind.DEPLOYMENT
        
    for kind in WorkloadKind:
        if value.lower() == kind.value.lower():
            return kind
            
    logger.warning(f"Unrecognized workload kind {value!r}, using Deployment")
    return WorkloadKind.DEPLOYMENT


def check_mount_paths(spec: WorkloadSpec) -> None:
    """Reject mount paths used more than once across the pod."""
    owners: Dict[str, str] = {}
    for container_key, container in sorted(spec.containers.items()):
        for path in list(container.files) + list(container.volumes):
            if path in owners:
                raise ManifestError(
                    f"Mount path {path} of container {container_key} "
                    f"collides with container {owners[path]}"
                )
            owners[path] = container_key


def normalize(spec: WorkloadSpec) -> NormalizedWorkload:
    """Resolve workload kind and pod annotations, validate mount paths."""
    check_mount_paths(spec)
    
    kind = resolve_kind(spec.annotations)
    pod_annotations = dict(spec.annotations)
    pod_annotations.update(spec.additional_annotations)
    
    logger.debug(f"Normalized workload {spec.name}: kind={kind.value}")
    return NormalizedWorkload(spec=spec, kind=kind, pod_annotations=pod_annotations)
