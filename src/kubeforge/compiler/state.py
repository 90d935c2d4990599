"""Persistent store for generated workload identifiers.

The pod selector label carries a random identifier. It must be generated once
per workload and reused afterwards, otherwise every render would change the
selector and replace the pods.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ruamel.yaml import YAML


logger = logging.getLogger(__name__)

IDENTIFIER_BYTES = 8


class BaseIdentifierStore(ABC):
    """Interface that all identifier stores must implement."""
    
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the identifier stored under ``key``, if any."""
        pass
        
    @abstractmethod
    def put(self, key: str, identifier: str) -> None:
        """Store an identifier under ``key``."""
        pass


class MemoryIdentifierStore(BaseIdentifierStore):
    """Identifier store kept in memory."""
    
    def __init__(self, identifiers: Optional[Dict[str, str]] = None):
        self.identifiers: Dict[str, str] = dict(identifiers or {})
        
    def get(self, key: str) -> Optional[str]:
        return self.identifiers.get(key)
        
    def put(self, key: str, identifier: str) -> None:
        self.identifiers[key] = identifier


class FileIdentifierStore(BaseIdentifierStore):
    """Identifier store backed by a YAML mapping on disk."""
    
    def __init__(self, path: Path):
        """Initialize file store."""
        self.path = Path(path)
        self.yaml = YAML()
        
    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = self.yaml.load(self.path.read_text())
        return dict(data or {})
        
    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return str(value) if value is not None else None
        
    def put(self, key: str, identifier: str) -> None:
        data = self._read()
        data[key] = identifier
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as stream:
            self.yaml.dump(data, stream)
        logger.debug(f"Stored identifier for {key} in {self.path}")


def generate_identifier() -> str:
    """Random 8-byte identifier as 16 hex characters."""
    return secrets.token_hex(IDENTIFIER_BYTES)


def resolve_identifier(store: BaseIdentifierStore, key: str) -> str:
    """Return the stored identifier for ``key``, generating it on first use."""
    identifier = store.get(key)
    if identifier:
        return identifier
        
    identifier = generate_identifier()
    store.put(key, identifier)
    logger.info(f"Generated identifier for {key}")
    return identifier
