"""Secret materialization for container variables and inline files."""

import hashlib
import logging
import posixpath
from typing import Dict, List

from jinja2 import TemplateError

from kubeforge.compiler.errors import ManifestError
from kubeforge.compiler.normalizer import NormalizedWorkload
from kubeforge.models.config import CompilerConfig
from kubeforge.models.manifest import SecretManifest
from kubeforge.models.workload import FileSpec
from kubeforge.utils.templates import expand_placeholders


logger = logging.getLogger(__name__)


def file_hash(mount_path: str) -> str:
    """Short stable hash of a mount path, safe for resource names."""
    return hashlib.sha256(mount_path.encode("utf-8")).hexdigest()[:10]


def file_key(mount_path: str) -> str:
    """Secret data key for a mounted file: the last path segment."""
    return posixpath.basename(mount_path.rstrip("/"))


def env_checksum_key(container_key: str) -> str:
    return f"env-{container_key}"


def file_checksum_key(container_key: str, mount_path: str) -> str:
    return f"file-{container_key}-{file_hash(mount_path)}"


def env_secret_name(workload_name: str, container_key: str) -> str:
    return f"{workload_name}-{container_key}-env"


def file_secret_name(workload_name: str, container_key: str, mount_path: str) -> str:
    return f"{workload_name}-{container_key}-{file_hash(mount_path)}"


def _placeholder_context(workload: NormalizedWorkload) -> Dict[str, Dict]:
    return {
        "metadata": {
            "name": workload.name,
            "namespace": workload.namespace,
            "annotations": dict(workload.spec.annotations),
        }
    }


def _file_content(
    workload: NormalizedWorkload,
    container_key: str,
    mount_path: str,
    spec: FileSpec,
) -> str:
    """Text content of a file with placeholders expanded unless disabled."""
    if spec.no_expand:
        return spec.content

    try:
        return expand_placeholders(spec.content, **_placeholder_context(workload))
    except TemplateError as e:
        raise ManifestError(
            f"Cannot expand content of {mount_path} in container {container_key}: {e}. "
            "Set noExpand: true on the file to mount its content verbatim"
        ) from e


def materialize_secrets(
    workload: NormalizedWorkload,
    config: CompilerConfig,
) -> List[SecretManifest]:
    """Build one Secret per container with variables and one per inline file."""
    secrets: List[SecretManifest] = []
    labels = {"app.kubernetes.io/name": workload.name}

    for container_key, container in workload.containers:
        if container.variables:
            secrets.append(SecretManifest(
                name=env_secret_name(workload.name, container_key),
                namespace=workload.namespace,
                checksum_key=env_checksum_key(container_key),
                data=dict(container.variables),
                labels=dict(labels),
            ))
            logger.debug(f"Materialized env secret for container {container_key}")

        for mount_path, file_spec in sorted(container.files.items()):
            if not file_spec.is_inline:
                logger.debug(
                    f"File {mount_path} in container {container_key} "
                    f"references {file_spec.source}, not materialized"
                )
                continue

            secret = SecretManifest(
                name=file_secret_name(workload.name, container_key, mount_path),
                namespace=workload.namespace,
                checksum_key=file_checksum_key(container_key, mount_path),
                labels=dict(labels),
            )
            key = file_key(mount_path)

            if file_spec.binary_content is not None:
                if not config.binary_content:
                    raise ManifestError(
                        f"binaryContent for {mount_path} in container {container_key} "
                        "is disabled by configuration"
                    )
                secret.binary_data[key] = file_spec.binary_content
            else:
                secret.data[key] = _file_content(workload, container_key, mount_path, file_spec)

            secrets.append(secret)
            logger.debug(f"Materialized file secret {secret.name} for {mount_path}")

    logger.info(f"Materialized {len(secrets)} secret(s) for workload {workload.name}")
    return secrets
