"""
contract-chat: conversational smart contract generation and deployment
"""

from importlib.metadata import PackageNotFoundError, version

from .addresses import is_valid_address, validate_address
from .compilation import SolcCompiler
from .config import Settings
from .conversation import Conversation
from .deployment import DeploymentCoordinator
from .exceptions import (
    CompilationFailedError,
    ConfirmationTimeoutError,
    ContractChatError,
    ConversationBusyError,
    DeploymentError,
    ErrorKind,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidInputError,
    NetworkSwitchRejectedError,
    ServiceUnavailableError,
    StoreCorruptedError,
    TransactionRejectedError,
    UnknownError,
    WalletNotConnectedError,
)
from .extraction import extract_solidity_source
from .generation import GenerationClient
from .resolver import ConstructorArgumentResolver, resolve_constructor_args
from .storage import DeploymentStore
from .types import (
    CompiledArtifact,
    ConstructorInput,
    ContractRequest,
    ConversationStep,
    DeploymentRecord,
    Notice,
    Turn,
)
from .wallet import WalletProvider, Web3WalletProvider

try:
    __version__ = version("contract-chat")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Conversation",
    "DeploymentCoordinator",
    "DeploymentStore",
    "GenerationClient",
    "SolcCompiler",
    "Settings",
    "WalletProvider",
    "Web3WalletProvider",
    "ConstructorArgumentResolver",
    "resolve_constructor_args",
    "extract_solidity_source",
    "validate_address",
    "is_valid_address",
    "CompiledArtifact",
    "ConstructorInput",
    "ContractRequest",
    "ConversationStep",
    "DeploymentRecord",
    "Notice",
    "Turn",
    "ErrorKind",
    "ContractChatError",
    "InvalidInputError",
    "InvalidAddressError",
    "ServiceUnavailableError",
    "CompilationFailedError",
    "DeploymentError",
    "WalletNotConnectedError",
    "NetworkSwitchRejectedError",
    "TransactionRejectedError",
    "InsufficientFundsError",
    "ConfirmationTimeoutError",
    "UnknownError",
    "ConversationBusyError",
    "StoreCorruptedError",
]
