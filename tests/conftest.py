"""Shared pytest fixtures for contract-chat tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from contract_chat.types import (
    CompiledArtifact,
    Confirmation,
    ConstructorInput,
    PendingTransaction,
    SwitchResult,
)

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
SIGNER = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
CONTRACT = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
OTHER = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"
TX_HASH = "0x" + "ab" * 32

FOO_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity 0.8.24;

import "@openzeppelin/contracts/token/ERC20/ERC20.sol";

contract FooToken is ERC20 {
    constructor(string memory name_, string memory symbol_) ERC20(name_, symbol_) {}
}"""


class FakeWallet:
    """In-memory wallet recording every request made to it."""

    def __init__(self, address: Optional[str] = SIGNER, chain_id: int = 8453):
        self.address = address
        self.chain_id = chain_id
        self.known_chains = {8453, 84532}
        self.switch_results: List[SwitchResult] = []  # Queued overrides
        self.approve_add = True
        self.deploy_error: Optional[Exception] = None
        self.confirm_errors: List[Exception] = []  # Raised in order before success
        self.contract_address = CONTRACT
        self.calls: List[Any] = []
        self.added: List[Any] = []

    def get_active_address(self) -> Optional[str]:
        return self.address

    def get_chain_id(self) -> int:
        return self.chain_id

    def request_network_switch(self, chain_id: int) -> SwitchResult:
        self.calls.append(("switch", chain_id))
        if self.switch_results:
            result = self.switch_results.pop(0)
        elif chain_id not in self.known_chains:
            result = SwitchResult.UNKNOWN_NETWORK
        else:
            result = SwitchResult.OK
        if result == SwitchResult.OK:
            self.chain_id = chain_id
        return result

    def request_add_network(self, descriptor) -> bool:
        self.calls.append(("add", descriptor.chain_id))
        self.added.append(descriptor)
        if self.approve_add:
            self.known_chains.add(descriptor.chain_id)
        return self.approve_add

    def deploy_contract(self, abi, bytecode, args) -> PendingTransaction:
        self.calls.append(("deploy", list(args)))
        if self.deploy_error is not None:
            raise self.deploy_error
        return PendingTransaction(transaction_hash=TX_HASH)

    def await_confirmation(self, pending, timeout) -> Confirmation:
        self.calls.append(("confirm", timeout))
        if self.confirm_errors:
            raise self.confirm_errors.pop(0)
        return Confirmation(
            contract_address=self.contract_address,
            transaction_hash=pending.transaction_hash,
        )


class FakeGenerator:
    """Generator returning canned responses and recording histories."""

    def __init__(self, responses: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.histories: List[List[Any]] = []

    def generate(self, history) -> str:
        self.histories.append(list(history))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeCompiler:
    """Compiler returning a fixed artifact or raising a fixed error."""

    def __init__(self, artifact: CompiledArtifact, error: Optional[Exception] = None):
        self.artifact = artifact
        self.error = error
        self.sources: List[str] = []

    def compile(self, source: str) -> CompiledArtifact:
        self.sources.append(source)
        if self.error is not None:
            raise self.error
        return self.artifact


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def compiler_output(fixtures_dir: Path) -> Dict[str, Any]:
    """Load a standard-JSON compiler output with one deployable contract."""
    with open(fixtures_dir / "compiler_output.json") as f:
        return json.load(f)


@pytest.fixture
def legacy_store_path(tmp_path: Path, fixtures_dir: Path) -> Path:
    """Copy the unversioned list-layout store into a temporary file."""
    path = tmp_path / "deployments.json"
    path.write_text((fixtures_dir / "legacy_store.json").read_text())
    return path


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Return a store path inside a data directory that does not exist yet."""
    return tmp_path / ".contract-chat" / "deployments.json"


@pytest.fixture
def token_artifact() -> CompiledArtifact:
    """Artifact whose constructor takes a name and a symbol."""
    inputs = (
        ConstructorInput(name="name_", type="string"),
        ConstructorInput(name="symbol_", type="string"),
    )
    abi = [
        {
            "type": "constructor",
            "inputs": [{"name": i.name, "type": i.type} for i in inputs],
        }
    ]
    return CompiledArtifact(
        name="FooToken",
        abi=abi,
        bytecode="0x6080604052",
        constructor_inputs=inputs,
    )


@pytest.fixture
def fake_wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def foo_response() -> str:
    """Generation response wrapping FOO_SOURCE in a fenced block."""
    return f"Here is your token:\n\n```solidity\n{FOO_SOURCE}\n```\n\nEnjoy!"
