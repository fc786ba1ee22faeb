"""Data types and dataclasses for contract-chat library."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ErrorKind


class ConversationStep(str, Enum):
    """
    Steps of a contract conversation, in the order they are visited.

    Only a successful deployment reaches DEPLOYED; only a restart leaves it.
    """

    NETWORK_SELECTION = "network-selection"
    OWNER_ADDRESS = "owner-address"
    CONTRACT_DESCRIPTION = "contract-description"
    REVIEW = "review"
    DEPLOYED = "deployed"


class SwitchResult(Enum):
    """Outcome of asking a wallet to change its active network."""

    OK = "ok"
    REJECTED = "rejected"
    UNKNOWN_NETWORK = "unknown-network"


@dataclass
class ContractRequest:
    """Parameters collected across the conversation."""

    network: Optional[str] = None  # "base-mainnet" or "base-sepolia"
    owner_address: Optional[str] = None  # Checksummed address
    description: Optional[str] = None  # User's free-text description
    contract_type: Optional[str] = None  # e.g. "Custom"
    source_code: Optional[str] = None  # Extracted Solidity source

    def assign(self, **values: Any) -> None:
        """
        Set fields that have not been set yet.

        All values are checked before any is written, so a rejected call
        leaves the request untouched.

        Raises:
            AttributeError: If a name is not a request field
            ValueError: If a field already holds a value
        """
        for name in values:
            if not hasattr(self, name):
                raise AttributeError(f"ContractRequest has no field '{name}'")
            if getattr(self, name) is not None:
                raise ValueError(f"ContractRequest.{name} is already set")
        for name, value in values.items():
            setattr(self, name, value)


@dataclass(frozen=True)
class ConstructorInput:
    """A named, typed constructor parameter."""

    name: str
    type: str


@dataclass(frozen=True)
class CompiledArtifact:
    """Compiler output for the contract selected from a source unit."""

    name: str  # Contract identifier
    abi: List[Dict[str, Any]]
    bytecode: str  # Hex creation code
    constructor_inputs: Tuple[ConstructorInput, ...] = ()


@dataclass(frozen=True)
class PendingTransaction:
    """A submitted but unconfirmed contract-creation transaction."""

    transaction_hash: str


@dataclass(frozen=True)
class Confirmation:
    """Receipt data for a confirmed contract creation."""

    contract_address: str
    transaction_hash: str


@dataclass(frozen=True)
class NetworkDescriptor:
    """What a wallet needs to register a network it does not know."""

    chain_id: int
    chain_name: str
    rpc_url: str
    block_explorer_url: str
    native_currency: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DeploymentRecord:
    """Information about a contract deployed through the conversation."""

    # Required fields
    address: str  # Checksummed contract address
    network: str  # "base-mainnet" or "base-sepolia"
    name: str  # Contract name from the compiler
    abi: List[Dict[str, Any]]
    deployed_by: str  # Signer address
    transaction_hash: str

    # Optional fields
    chain_id: Optional[int] = None
    url: Optional[str] = None  # Block explorer URL
    constructor_args: Optional[List[Any]] = None
    deployed_at: Optional[str] = None  # "%Y-%m-%d %H:%M:%S UTC"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ChatMessage:
    """A role-tagged message exchanged with the generation service."""

    role: str  # "system", "user" or "assistant"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Notice:
    """A transient, user-facing error that does not advance the conversation."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Turn:
    """Result of one user action."""

    step: ConversationStep
    message: Optional[str] = None  # The assistant's reply, if any
    notice: Optional[Notice] = None
