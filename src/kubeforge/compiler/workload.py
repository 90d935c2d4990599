"""Deployment / StatefulSet rendering."""

import hashlib
import logging
from typing import Any, Dict, List, Optional

from kubeforge.compiler.checksum import annotate
from kubeforge.compiler.normalizer import NormalizedWorkload
from kubeforge.compiler.secrets import (
    env_checksum_key,
    file_checksum_key,
    file_hash,
    file_key,
)
from kubeforge.models.config import CompilerConfig
from kubeforge.models.manifest import SecretManifest, WorkloadKind
from kubeforge.models.workload import ContainerSpec, ProbeSpec, ResourcesSpec


logger = logging.getLogger(__name__)

INSTANCE_LABEL = "app.kubernetes.io/instance"
NAME_LABEL = "app.kubernetes.io/name"
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"


def selector_labels(identifier: str) -> Dict[str, str]:
    """Labels matching the workload's pods."""
    return {INSTANCE_LABEL: identifier}


def workload_labels(name: str, identifier: str) -> Dict[str, str]:
    labels = {NAME_LABEL: name, MANAGED_BY_LABEL: "kubeforge"}
    labels.update(selector_labels(identifier))
    return labels


def file_volume_name(mount_path: str) -> str:
    return f"file-{file_hash(mount_path)}"


def claim_volume_name(claim: str) -> str:
    return f"volume-{hashlib.sha256(claim.encode('utf-8')).hexdigest()[:10]}"


def _resources(spec: Optional[ResourcesSpec]) -> Optional[Dict[str, Dict[str, str]]]:
    """Resource block with unset quantities omitted."""
    if spec is None:
        return None

    result = {}
    for section in ("limits", "requests"):
        values = getattr(spec, section)
        if values is None:
            continue
        quantities = values.model_dump(exclude_none=True)
        if quantities:
            result[section] = quantities
    return result or None


def _probe(spec: Optional[ProbeSpec]) -> Optional[Dict[str, Any]]:
    if spec is None:
        return None

    if spec.http_get is not None:
        http_get: Dict[str, Any] = {"path": spec.http_get.path, "port": spec.http_get.port}
        if spec.http_get.host:
            http_get["host"] = spec.http_get.host
        if spec.http_get.scheme:
            http_get["scheme"] = spec.http_get.scheme
        if spec.http_get.http_headers:
            http_get["httpHeaders"] = [
                {"name": header.name, "value": header.value}
                for header in spec.http_get.http_headers
            ]
        return {"httpGet": http_get}

    return {"exec": {"command": list(spec.exec_action.command)}}


def _volume_mounts(container: ContainerSpec) -> List[Dict[str, Any]]:
    mounts = []
    for mount_path, file_spec in sorted(container.files.items()):
        if not file_spec.is_inline:
            continue
        mounts.append({
            "name": file_volume_name(mount_path),
            "mountPath": mount_path,
            "subPath": file_key(mount_path),
            "readOnly": True,
        })

    for mount_path, volume in sorted(container.volumes.items()):
        mount: Dict[str, Any] = {
            "name": claim_volume_name(volume.source),
            "mountPath": mount_path,
            "readOnly": volume.read_only,
        }
        if volume.path:
            mount["subPath"] = volume.path
        mounts.append(mount)

    return mounts


def _container(
    container_key: str,
    container: ContainerSpec,
    secret_names: Dict[str, str],
    config: CompilerConfig,
) -> Dict[str, Any]:
    """Render one container entry."""
    result: Dict[str, Any] = {"name": container_key, "image": container.image}

    if container.command:
        result["command"] = list(container.command)
    if container.args:
        result["args"] = list(container.args)

    if container.variables:
        result["envFrom"] = [
            {"secretRef": {"name": secret_names[env_checksum_key(container_key)]}}
        ]

    resources = _resources(container.resources)
    if resources:
        result["resources"] = resources

    liveness = _probe(container.liveness_probe)
    if liveness:
        result["livenessProbe"] = liveness
    readiness = _probe(container.readiness_probe)
    if readiness:
        result["readinessProbe"] = readiness

    mounts = _volume_mounts(container)
    if mounts:
        result["volumeMounts"] = mounts

    if config.security_hardening:
        result["securityContext"] = {
            "allowPrivilegeEscalation": False,
            "readOnlyRootFilesystem": True,
        }

    return result


def _pod_volumes(
    workload: NormalizedWorkload,
    secret_names: Dict[str, str],
) -> List[Dict[str, Any]]:
    """One volume per file secret and one per distinct claim."""
    volumes = []
    claims = set()

    for container_key, container in workload.containers:
        for mount_path, file_spec in sorted(container.files.items()):
            if not file_spec.is_inline:
                continue
            item: Dict[str, Any] = {"key": file_key(mount_path), "path": file_key(mount_path)}
            if file_spec.octal_mode is not None:
                item["mode"] = file_spec.octal_mode
            volumes.append({
                "name": file_volume_name(mount_path),
                "secret": {
                    "secretName": secret_names[file_checksum_key(container_key, mount_path)],
                    "items": [item],
                },
            })

        for volume in container.volumes.values():
            claims.add(volume.source)

    for claim in sorted(claims):
        volumes.append({
            "name": claim_volume_name(claim),
            "persistentVolumeClaim": {"claimName": claim},
        })

    return volumes


def build_pod_template(
    workload: NormalizedWorkload,
    secrets: List[SecretManifest],
    identifier: str,
    checksum: str,
    config: CompilerConfig,
) -> Dict[str, Any]:
    """Pod template shared by Deployment and StatefulSet."""
    secret_names = {secret.checksum_key: secret.name for secret in secrets}
    pod_spec: Dict[str, Any] = {
        "securityContext": {
            "runAsNonRoot": True,
            "seccompProfile": {"type": "RuntimeDefault"},
        },
        "containers": [
            _container(key, container, secret_names, config)
            for key, container in workload.containers
        ],
    }
    if workload.spec.service_account_name:
        pod_spec["serviceAccountName"] = workload.spec.service_account_name

    volumes = _pod_volumes(workload, secret_names)
    if volumes:
        pod_spec["volumes"] = volumes

    return {
        "metadata": {
            "labels": workload_labels(workload.name, identifier),
            "annotations": annotate(workload.pod_annotations, checksum),
        },
        "spec": pod_spec,
    }


def render_workload(
    workload: NormalizedWorkload,
    secrets: List[SecretManifest],
    identifier: str,
    checksum: str,
    config: CompilerConfig,
) -> Dict[str, Any]:
    """Render the single Deployment or StatefulSet for a workload."""
    metadata: Dict[str, Any] = {
        "name": workload.name,
        "namespace": workload.namespace,
        "labels": workload_labels(workload.name, identifier),
    }
    if workload.spec.annotations:
        metadata["annotations"] = dict(workload.spec.annotations)

    spec: Dict[str, Any] = {
        "replicas": 1,
        "selector": {"matchLabels": selector_labels(identifier)},
        "template": build_pod_template(workload, secrets, identifier, checksum, config),
    }
    if workload.kind == WorkloadKind.STATEFULSET:
        spec["serviceName"] = workload.name

    logger.debug(
        f"Rendered {workload.kind.value} {workload.name} "
        f"with {len(workload.containers)} container(s) and {len(secrets)} secret(s)"
    )
    return {
        "apiVersion": "apps/v1",
        "kind": workload.kind.value,
        "metadata": metadata,
        "spec": spec,
    }
