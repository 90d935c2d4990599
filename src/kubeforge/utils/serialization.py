"""YAML serialization helpers."""

import io
from typing import Any, Dict, Iterable

from ruamel.yaml import YAML


def _dumper() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def dump_manifests(manifests: Iterable[Dict[str, Any]]) -> str:
    """Dump manifests as a multi-document YAML string."""
    stream = io.StringIO()
    _dumper().dump_all(list(manifests), stream)
    return stream.getvalue()
