"""Environment-driven settings for contract-chat."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv

from .constants import (
    DEFAULT_CONFIRMATION_ATTEMPTS,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_GENERATION_MODEL,
    DEFAULT_GENERATION_URL,
    DEFAULT_SOLC_VERSION,
    NETWORK_CONFIG,
)
from .paths import get_default_library_root, get_store_path

REQUIRED_ENV_VARS = ("XAI_API_KEY",)


@dataclass
class Settings:
    """Runtime configuration."""

    xai_api_key: Optional[str] = None
    generation_url: str = DEFAULT_GENERATION_URL
    generation_model: str = DEFAULT_GENERATION_MODEL
    solc_version: str = DEFAULT_SOLC_VERSION
    library_root: Path = field(default_factory=get_default_library_root)
    store_path: Path = field(default_factory=get_store_path)
    deployer_private_key: Optional[str] = None
    rpc_urls: Dict[str, str] = field(default_factory=dict)  # network -> RPC URL
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    confirmation_attempts: int = DEFAULT_CONFIRMATION_ATTEMPTS

    @classmethod
    def from_env(cls, env_file: Optional[Union[Path, str]] = None) -> "Settings":
        """
        Read settings from the environment.

        Variables already set in the environment win over the .env file.

        Args:
            env_file: .env file to load (defaults to searching from the
                      current directory)

        Returns:
            Settings instance

        Raises:
            ValueError: If a numeric variable is not a number
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        rpc_urls = {
            network: os.environ.get(config["default_rpc_env"], config["rpc_url"])
            for network, config in NETWORK_CONFIG.items()
        }

        library_root = os.environ.get("CONTRACT_LIBRARY_ROOT")
        store_path = os.environ.get("CONTRACT_CHAT_STORE")

        return cls(
            xai_api_key=os.environ.get("XAI_API_KEY"),
            generation_url=os.environ.get("XAI_API_URL", DEFAULT_GENERATION_URL),
            generation_model=os.environ.get("XAI_MODEL", DEFAULT_GENERATION_MODEL),
            solc_version=os.environ.get("SOLC_VERSION", DEFAULT_SOLC_VERSION),
            library_root=Path(library_root) if library_root else get_default_library_root(),
            store_path=Path(store_path) if store_path else get_store_path(),
            deployer_private_key=os.environ.get("DEPLOYER_PRIVATE_KEY"),
            rpc_urls=rpc_urls,
            confirmation_timeout=float(
                os.environ.get("CONFIRMATION_TIMEOUT", DEFAULT_CONFIRMATION_TIMEOUT)
            ),
            confirmation_attempts=int(
                os.environ.get("CONFIRMATION_ATTEMPTS", DEFAULT_CONFIRMATION_ATTEMPTS)
            ),
        )

    def validate(self) -> None:
        """
        Check that required settings are present.

        Raises:
            ValueError: Naming the first missing environment variable
        """
        values = {"XAI_API_KEY": self.xai_api_key}
        for name in REQUIRED_ENV_VARS:
            if not values[name]:
                raise ValueError(f"Missing required environment variable: {name}")
        if self.confirmation_attempts < 1:
            raise ValueError("CONFIRMATION_ATTEMPTS must be at least 1")
