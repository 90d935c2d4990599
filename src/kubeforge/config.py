"""Loading of compiler configuration and workload files."""

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML

from kubeforge.models.config import CompilerConfig
from kubeforge.models.workload import WorkloadSpec
from kubeforge.utils.templates import merge_dicts


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "kubeforge.yaml"
CONFIG_ENV_VAR = "KUBEFORGE_CONFIG"


def _plain(data: Any) -> Any:
    """Convert ruamel round-trip containers into plain dicts and lists."""
    if isinstance(data, dict):
        return {str(key): _plain(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_plain(value) for value in data]
    return data


class WorkloadLoader:
    """Reads configuration and workload YAML files."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize loader."""
        if config_path is None:
            config_path = Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))
        self.config_path = Path(config_path)
        self.yaml = YAML(typ="safe")
        self._file_hashes: Dict[str, str] = {}

    def load_config(self) -> CompilerConfig:
        """Load compiler configuration, falling back to defaults."""
        if not self.config_path.exists():
            logger.debug(f"Config file {self.config_path} not found, using defaults")
            return CompilerConfig()

        try:
            data = self.read_yaml(self.config_path) or {}
            config = CompilerConfig(**data)
            logger.debug(f"Loaded config: {self.config_path}")
            return config
        except ValidationError as e:
            logger.error(f"Invalid config {self.config_path}: {e}")
            raise

    def load_workload(self, path: Path, overrides: Optional[Path] = None) -> WorkloadSpec:
        """Load a workload file, deep-merging an optional overrides file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Workload file not found: {path}")

        data = self.read_yaml(path) or {}
        if overrides is not None:
            overrides = Path(overrides)
            if not overrides.exists():
                raise FileNotFoundError(f"Overrides file not found: {overrides}")
            data = merge_dicts(data, self.read_yaml(overrides) or {})
            logger.debug(f"Applied overrides from {overrides}")

        try:
            spec = WorkloadSpec.model_validate(data)
            logger.debug(f"Loaded workload {spec.name} from {path}")
            return spec
        except ValidationError as e:
            logger.error(f"Invalid workload {path}: {e}")
            raise

    def read_yaml(self, file_path: Path) -> Any:
        """Read and parse YAML file."""
        content = Path(file_path).read_text()
        # Store hash for change detection
        self._file_hashes[str(file_path)] = hashlib.md5(content.encode()).hexdigest()
        return _plain(self.yaml.load(content))

    def has_changed(self) -> bool:
        """Check if any file read so far has changed on disk."""
        for file_path, known_hash in self._file_hashes.items():
            path = Path(file_path)
            if not path.exists():
                return True
            current_hash = hashlib.md5(path.read_text().encode()).hexdigest()
            if current_hash != known_hash:
                return True
        return False

    @property
    def watched_files(self) -> list[Path]:
        """Files read so far."""
        return [Path(file_path) for file_path in self._file_hashes]
