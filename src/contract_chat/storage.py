"""Persisted deployment records for contract-chat library."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .constants import STORAGE_KEY, STORE_SCHEMA_VERSION
from .exceptions import StoreCorruptedError
from .paths import get_store_path
from .types import DeploymentRecord

logger = logging.getLogger(__name__)

# One lock per store file shared by every DeploymentStore in the process
_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()

# camelCase keys of the unversioned list layout
LEGACY_FIELD_NAMES = {
    "deployedBy": "deployed_by",
    "deploymentTx": "transaction_hash",
    "transactionHash": "transaction_hash",
    "chainId": "chain_id",
    "constructorArgs": "constructor_args",
    "deployedAt": "deployed_at",
}


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        if key not in _PATH_LOCKS:
            _PATH_LOCKS[key] = threading.Lock()
        return _PATH_LOCKS[key]


def parse_record(data: Dict[str, Any]) -> DeploymentRecord:
    """
    Build a DeploymentRecord from a stored entry.

    Accepts both snake_case entries and the camelCase keys of the legacy
    layout.

    Raises:
        StoreCorruptedError: If a required field is missing
    """
    normalized = {LEGACY_FIELD_NAMES.get(key, key): value for key, value in data.items()}
    try:
        return DeploymentRecord(
            address=normalized["address"],
            network=normalized["network"],
            name=normalized["name"],
            abi=normalized.get("abi", []),
            deployed_by=normalized["deployed_by"],
            transaction_hash=normalized.get("transaction_hash") or "",
            chain_id=normalized.get("chain_id"),
            url=normalized.get("url"),
            constructor_args=normalized.get("constructor_args"),
            deployed_at=normalized.get("deployed_at"),
        )
    except KeyError as e:
        raise StoreCorruptedError(f"Deployment entry missing field {e}") from e


class DeploymentStore:
    """
    Append-only collection of deployment records in one JSON file.

    Every append reads the whole document, adds one record and writes the
    whole document back while holding the file's lock.
    """

    def __init__(self, path: Optional[Union[Path, str]] = None):
        """
        Initialize the store.

        Args:
            path: Path to the store file
                  If None, uses ./.contract-chat/deployments.json
        """
        self.path = Path(path) if path is not None else get_store_path()
        self._lock = _lock_for(self.path)

    def _read_document(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path) as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"Deployment store at {self.path} is not valid JSON") from e

        # Unversioned layout: a bare list of records
        if isinstance(data, list):
            return data

        if not isinstance(data, dict) or not isinstance(data.get(STORAGE_KEY), list):
            raise StoreCorruptedError(
                f"Deployment store at {self.path} has no '{STORAGE_KEY}' list"
            )

        version = data.get("schema_version")
        if version != STORE_SCHEMA_VERSION:
            logger.warning(
                "Deployment store %s has schema version %s, expected %s",
                self.path,
                version,
                STORE_SCHEMA_VERSION,
            )
        return data[STORAGE_KEY]

    def _write_document(self, entries: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {"schema_version": STORE_SCHEMA_VERSION, STORAGE_KEY: entries}

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def load(self) -> List[DeploymentRecord]:
        """
        Read every stored record, oldest first.

        Returns:
            List of DeploymentRecord (empty if the file does not exist)

        Raises:
            StoreCorruptedError: If the file cannot be parsed
        """
        with self._lock:
            entries = self._read_document()
        return [parse_record(entry) for entry in entries]

    def append(self, record: DeploymentRecord) -> None:
        """
        Add one record to the end of the collection.

        Entries written in the legacy layout are rewritten in the current
        layout on the first append.

        Raises:
            StoreCorruptedError: If the existing file cannot be parsed
            OSError: If the file cannot be written
        """
        with self._lock:
            entries = [parse_record(entry).to_dict() for entry in self._read_document()]
            entries.append(record.to_dict())
            self._write_document(entries)
        logger.debug("Stored deployment %s in %s", record.address, self.path)

    def records(self, network: Optional[str] = None) -> List[DeploymentRecord]:
        """
        Get stored records, optionally for one network only.

        Args:
            network: Network name to filter on ("base-mainnet" or "base-sepolia")

        Returns:
            Matching records, oldest first
        """
        records = self.load()
        if network is None:
            return records
        return [r for r in records if r.network == network]
