"""Solidity compilation through solc standard JSON."""

import logging
import posixpath
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import requests
import solcx
from solcx.exceptions import SolcError, SolcInstallationError

from .constants import (
    DEFAULT_EVM_VERSION,
    DEFAULT_OPTIMIZER_RUNS,
    DEFAULT_SOLC_VERSION,
    IMPORT_WHITELIST,
    SOURCE_UNIT_NAME,
)
from .exceptions import CompilationFailedError, ServiceUnavailableError
from .paths import get_default_library_root
from .types import CompiledArtifact, ConstructorInput

logger = logging.getLogger(__name__)

IMPORT_STATEMENT = re.compile(
    r"""\bimport\s+(?:[^"';]*?\bfrom\s+)?["']([^"']+)["']"""
)
BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
LINE_COMMENT = re.compile(r"//[^\n]*")


def find_imports(source: str) -> List[str]:
    """
    List import paths in a Solidity source, in order of appearance.

    Commented-out imports are ignored.
    """
    stripped = LINE_COMMENT.sub("", BLOCK_COMMENT.sub("", source))
    return IMPORT_STATEMENT.findall(stripped)


def _resolve_unit_name(importer: str, path: str) -> str:
    """Turn an import path into a source unit name relative to its importer."""
    if path.startswith("./") or path.startswith("../"):
        return posixpath.normpath(posixpath.join(posixpath.dirname(importer), path))
    return path


def collect_sources(
    source: str,
    library_root: Path,
    whitelist: Sequence[str] = IMPORT_WHITELIST,
) -> Dict[str, Dict[str, str]]:
    """
    Build the standard-JSON sources map for a contract and its imports.

    Imports whose unit name starts with a whitelisted prefix are read from
    library_root/<unit name>, following their own imports recursively.
    Paths that resolve outside library_root are treated as missing.

    Args:
        source: Solidity source of the main contract
        library_root: Directory holding installed packages (node_modules)
        whitelist: Accepted import prefixes

    Returns:
        Mapping of source unit name -> {"content": text}

    Raises:
        CompilationFailedError: If any import cannot be found
    """
    root = library_root.resolve()
    sources: Dict[str, Dict[str, str]] = {SOURCE_UNIT_NAME: {"content": source}}
    pending = [(SOURCE_UNIT_NAME, source)]
    missing: List[str] = []

    while pending:
        importer, content = pending.pop()
        for path in find_imports(content):
            unit_name = _resolve_unit_name(importer, path)
            if unit_name in sources or unit_name in missing:
                continue

            file_path = (library_root / unit_name).resolve()
            if (
                not unit_name.startswith(tuple(whitelist))
                or not file_path.is_relative_to(root)
                or not file_path.is_file()
            ):
                missing.append(unit_name)
                continue

            text = file_path.read_text(encoding="utf-8")
            sources[unit_name] = {"content": text}
            pending.append((unit_name, text))

    if missing:
        raise CompilationFailedError(
            "\n".join(f"File not found: {unit_name}" for unit_name in missing)
        )

    return sources


def parse_compiler_output(output: Dict[str, Any]) -> CompiledArtifact:
    """
    Pick the deployable contract out of solc standard-JSON output.

    Args:
        output: Parsed compiler output

    Returns:
        CompiledArtifact for the first contract in the main source unit
        that has creation bytecode

    Raises:
        CompilationFailedError: If the output carries errors or no
                                deployable contract
    """
    errors = [e for e in output.get("errors", []) if e.get("severity") == "error"]
    if errors:
        raise CompilationFailedError(
            "\n".join(e.get("formattedMessage") or e.get("message", "") for e in errors)
        )

    contracts = output.get("contracts", {}).get(SOURCE_UNIT_NAME, {})
    for name, contract in contracts.items():
        bytecode = contract.get("evm", {}).get("bytecode", {}).get("object", "")
        if not bytecode:
            # Interfaces and abstract contracts have no creation code
            continue

        abi = contract.get("abi", [])
        constructor = next((item for item in abi if item.get("type") == "constructor"), None)
        inputs = tuple(
            ConstructorInput(name=i.get("name", ""), type=i["type"])
            for i in (constructor or {}).get("inputs", [])
        )
        return CompiledArtifact(
            name=name,
            abi=abi,
            bytecode=bytecode,
            constructor_inputs=inputs,
        )

    raise CompilationFailedError("No contract found in source")


class SolcCompiler:
    """Compiles generated contracts with a pinned solc release."""

    def __init__(
        self,
        solc_version: str = DEFAULT_SOLC_VERSION,
        library_root: Optional[Union[Path, str]] = None,
        optimizer_runs: int = DEFAULT_OPTIMIZER_RUNS,
        evm_version: str = DEFAULT_EVM_VERSION,
    ):
        self.solc_version = solc_version
        self.library_root = (
            Path(library_root) if library_root is not None else get_default_library_root()
        )
        self.optimizer_runs = optimizer_runs
        self.evm_version = evm_version

    def _ensure_installed(self) -> None:
        installed = {str(v) for v in solcx.get_installed_solc_versions()}
        if self.solc_version in installed:
            return

        logger.info("Installing solc %s", self.solc_version)
        try:
            solcx.install_solc(self.solc_version)
        except (SolcInstallationError, requests.RequestException, OSError) as e:
            raise ServiceUnavailableError(
                f"Could not install solc {self.solc_version}: {e}"
            ) from e

    def build_input(self, sources: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
        """Build the standard-JSON compiler input."""
        return {
            "language": "Solidity",
            "sources": sources,
            "settings": {
                "optimizer": {"enabled": True, "runs": self.optimizer_runs},
                "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}},
                "evmVersion": self.evm_version,
            },
        }

    def compile(self, source: str) -> CompiledArtifact:
        """
        Compile a contract.

        Args:
            source: Solidity source text

        Returns:
            CompiledArtifact of the deployable contract

        Raises:
            CompilationFailedError: On unresolved imports or compiler errors
            ServiceUnavailableError: If the compiler cannot be installed or run
        """
        sources = collect_sources(source, self.library_root)
        self._ensure_installed()

        try:
            output = solcx.compile_standard(
                self.build_input(sources), solc_version=self.solc_version
            )
        except SolcError as e:
            details = getattr(e, "message", None) or str(e)
            raise CompilationFailedError(details) from e
        except OSError as e:
            raise ServiceUnavailableError(f"Could not run solc: {e}") from e

        artifact = parse_compiler_output(output)
        logger.debug("Compiled %s (%d ABI entries)", artifact.name, len(artifact.abi))
        return artifact
