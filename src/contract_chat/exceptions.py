"""Custom exception classes for contract-chat library."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """
    Closed set of failure kinds surfaced to the conversation.

    Value strings are what a UI sees in a Notice.
    """

    INVALID_INPUT = "invalid-input"
    SERVICE_UNAVAILABLE = "service-unavailable"
    COMPILATION_FAILED = "compilation-failed"
    WALLET_NOT_CONNECTED = "wallet-not-connected"
    NETWORK_SWITCH_REJECTED = "network-switch-rejected"
    TRANSACTION_REJECTED = "transaction-rejected"
    INSUFFICIENT_FUNDS = "insufficient-funds"
    CONFIRMATION_TIMEOUT = "confirmation-timeout"
    UNKNOWN = "unknown"


class ContractChatError(Exception):
    """Base exception for all contract-chat errors."""

    kind = ErrorKind.UNKNOWN


class InvalidInputError(ContractChatError, ValueError):
    """Raised when user input does not match what the current step expects."""

    kind = ErrorKind.INVALID_INPUT


class InvalidAddressError(InvalidInputError):
    """Raised when a string is not a valid checksummed account address."""

    pass


class ServiceUnavailableError(ContractChatError, ConnectionError):
    """Raised when the generation or compilation service cannot be reached."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class CompilationFailedError(ContractChatError):
    """Raised when the compiler reports errors for the submitted source."""

    kind = ErrorKind.COMPILATION_FAILED

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


class DeploymentError(ContractChatError):
    """Base exception for deployments aborted by the wallet or the chain."""

    pass


class WalletNotConnectedError(DeploymentError):
    """Raised when no wallet (or no wallet account) is available."""

    kind = ErrorKind.WALLET_NOT_CONNECTED


class NetworkSwitchRejectedError(DeploymentError):
    """Raised when the wallet refuses to switch to (or add) the target network."""

    kind = ErrorKind.NETWORK_SWITCH_REJECTED


class TransactionRejectedError(DeploymentError):
    """Raised when the user declines to sign the deployment transaction."""

    kind = ErrorKind.TRANSACTION_REJECTED


class InsufficientFundsError(DeploymentError):
    """Raised when the signer cannot pay for the deployment."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class ConfirmationTimeoutError(DeploymentError):
    """Raised when a submitted deployment is not confirmed in time."""

    kind = ErrorKind.CONFIRMATION_TIMEOUT

    def __init__(self, message: str, transaction_hash: Optional[str] = None):
        super().__init__(message)
        self.transaction_hash = transaction_hash


class UnknownError(ContractChatError):
    """Raised for failures that fit no other kind."""

    kind = ErrorKind.UNKNOWN


class ConversationBusyError(ContractChatError, RuntimeError):
    """Raised when an action arrives while another one is still running."""

    pass


class StoreCorruptedError(ContractChatError, ValueError):
    """Raised when the deployment store file cannot be parsed."""

    pass
