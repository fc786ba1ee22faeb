"""Locations of the deployment store and the Solidity package tree."""

from pathlib import Path
from typing import Optional, Union

STORE_FILENAME = "deployments.json"


def get_default_data_dir() -> Path:
    """
    Directory that holds contract-chat's local state.

    Resolved against the working directory at call time, so each project
    keeps its own deployment history.

    Returns:
        Path to ./.contract-chat
    """
    return Path.cwd() / ".contract-chat"


def get_store_path(data_root: Optional[Union[Path, str]] = None) -> Path:
    """
    Where confirmed deployments are recorded.

    The file itself is created by DeploymentStore on the first append.

    Args:
        data_root: Directory for local state (defaults to ./.contract-chat);
                   relative paths are made absolute

    Returns:
        Path to the deployments.json store file
    """
    if data_root is None:
        data_root = get_default_data_dir()
    else:
        data_root = Path(data_root).absolute()

    return data_root / STORE_FILENAME


def get_default_library_root() -> Path:
    """Directory searched for whitelisted imports such as @openzeppelin/... (./node_modules)."""
    return Path.cwd() / "node_modules"
