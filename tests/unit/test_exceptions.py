"""Unit tests for custom exception classes."""

import pytest

from contract_chat.exceptions import (
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


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    def test_catch_invalid_address_as_value_error(self):
        """Test that InvalidAddressError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise InvalidAddressError("test")

    def test_catch_invalid_address_as_invalid_input(self):
        """Test that InvalidAddressError can be caught as InvalidInputError."""
        with pytest.raises(InvalidInputError):
            raise InvalidAddressError("test")

    def test_catch_service_unavailable_as_connection_error(self):
        """Test that ServiceUnavailableError can be caught as ConnectionError."""
        with pytest.raises(ConnectionError):
            raise ServiceUnavailableError("test")

    def test_catch_busy_as_runtime_error(self):
        """Test that ConversationBusyError can be caught as RuntimeError."""
        with pytest.raises(RuntimeError):
            raise ConversationBusyError("test")

    def test_catch_store_corrupted_as_value_error(self):
        """Test that StoreCorruptedError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise StoreCorruptedError("test")

    def test_catch_wallet_failures_as_deployment_error(self):
        """Test that wallet and chain failures share the DeploymentError base."""
        exceptions = [
            WalletNotConnectedError("test"),
            NetworkSwitchRejectedError("test"),
            TransactionRejectedError("test"),
            InsufficientFundsError("test"),
            ConfirmationTimeoutError("test"),
        ]

        for exc in exceptions:
            with pytest.raises(DeploymentError):
                raise exc

    def test_catch_all_as_contract_chat_error(self):
        """Test that every library error can be caught as ContractChatError."""
        exceptions = [
            InvalidInputError("test"),
            ServiceUnavailableError("test"),
            CompilationFailedError("test"),
            WalletNotConnectedError("test"),
            UnknownError("test"),
            ConversationBusyError("test"),
            StoreCorruptedError("test"),
        ]

        for exc in exceptions:
            with pytest.raises(ContractChatError):
                raise exc


class TestErrorKinds:
    """Test the kind tag carried by each exception."""

    @pytest.mark.parametrize(
        "exc,kind",
        [
            (InvalidInputError("x"), ErrorKind.INVALID_INPUT),
            (InvalidAddressError("x"), ErrorKind.INVALID_INPUT),
            (ServiceUnavailableError("x"), ErrorKind.SERVICE_UNAVAILABLE),
            (CompilationFailedError("x"), ErrorKind.COMPILATION_FAILED),
            (WalletNotConnectedError("x"), ErrorKind.WALLET_NOT_CONNECTED),
            (NetworkSwitchRejectedError("x"), ErrorKind.NETWORK_SWITCH_REJECTED),
            (TransactionRejectedError("x"), ErrorKind.TRANSACTION_REJECTED),
            (InsufficientFundsError("x"), ErrorKind.INSUFFICIENT_FUNDS),
            (ConfirmationTimeoutError("x"), ErrorKind.CONFIRMATION_TIMEOUT),
            (UnknownError("x"), ErrorKind.UNKNOWN),
        ],
    )
    def test_kind(self, exc, kind):
        """Test that each exception carries its error kind."""
        assert exc.kind == kind

    def test_kind_values_are_kebab_case(self):
        """Test that kind values are kebab-case strings."""
        assert ErrorKind.NETWORK_SWITCH_REJECTED.value == "network-switch-rejected"
        assert ErrorKind.INVALID_INPUT.value == "invalid-input"


class TestExceptionPayloads:
    """Test extra data attached to exceptions."""

    def test_compilation_details_preserved_verbatim(self):
        """Test that compiler details are kept unchanged."""
        details = "ParserError: Expected ';' but got '}'\n --> contract.sol:4:1:"
        exc = CompilationFailedError(details)

        assert exc.details == details
        assert str(exc) == details

    def test_confirmation_timeout_carries_hash(self):
        """Test that a confirmation timeout keeps the transaction hash."""
        exc = ConfirmationTimeoutError("late", transaction_hash="0xabc")

        assert exc.transaction_hash == "0xabc"
        assert str(exc) == "late"

    def test_confirmation_timeout_hash_optional(self):
        """Test that the transaction hash defaults to None."""
        assert ConfirmationTimeoutError("late").transaction_hash is None
