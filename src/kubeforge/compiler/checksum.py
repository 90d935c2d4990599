"""Checksum of materialized secret data, used to roll pods on change."""

import hashlib
import json
from typing import Dict, Iterable

from kubeforge.models.manifest import SecretManifest


CHECKSUM_ANNOTATION = "checksum/config"


def canonical_payload(secrets: Iterable[SecretManifest]) -> bytes:
    """Serialize secret payloads ordered by checksum key."""
    ordered = sorted(
        ((secret.checksum_key, secret.payload()) for secret in secrets),
        key=lambda item: item[0],
    )
    return json.dumps(ordered, sort_keys=True, separators=(",", ":")).encode("utf-8")


def compute_checksum(secrets: Iterable[SecretManifest]) -> str:
    """SHA-256 hex digest over all secret payloads."""
    return hashlib.sha256(canonical_payload(secrets)).hexdigest()


def annotate(annotations: Dict[str, str], checksum: str) -> Dict[str, str]:
    """Return a copy of ``annotations`` carrying the checksum."""
    result = dict(annotations)
    result[CHECKSUM_ANNOTATION] = checksum
    return result
