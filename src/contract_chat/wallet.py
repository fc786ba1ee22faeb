"""Wallet capability and a local-key implementation backed by web3."""

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from .addresses import validate_address
from .constants import NATIVE_CURRENCY, NETWORK_CONFIG
from .exceptions import (
    ConfirmationTimeoutError,
    DeploymentError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidInputError,
    TransactionRejectedError,
    UnknownError,
)
from .types import Confirmation, NetworkDescriptor, PendingTransaction, SwitchResult

logger = logging.getLogger(__name__)

# EIP-1193 "user rejected request"
USER_REJECTED_CODE = 4001


class WalletProvider(Protocol):
    """Capabilities the deployment pipeline needs from a wallet."""

    def get_active_address(self) -> Optional[str]:
        """Return the signing account, or None if no account is connected."""
        ...

    def get_chain_id(self) -> int:
        ...

    def request_network_switch(self, chain_id: int) -> SwitchResult:
        ...

    def request_add_network(self, descriptor: NetworkDescriptor) -> bool:
        ...

    def deploy_contract(
        self, abi: List[Dict[str, Any]], bytecode: str, args: Sequence[Any]
    ) -> PendingTransaction:
        ...

    def await_confirmation(
        self, pending: PendingTransaction, timeout: float
    ) -> Confirmation:
        ...


def network_descriptor(network: str, rpc_url: Optional[str] = None) -> NetworkDescriptor:
    """
    Build the descriptor a wallet needs to register a supported network.

    Args:
        network: Network name ("base-mainnet" or "base-sepolia")
        rpc_url: RPC endpoint (defaults to the public endpoint)

    Raises:
        ValueError: If the network is not supported
    """
    if network not in NETWORK_CONFIG:
        raise ValueError(f"Unknown network: {network}")
    config = NETWORK_CONFIG[network]
    return NetworkDescriptor(
        chain_id=config["chain_id"],
        chain_name=config["chain_name"],
        rpc_url=rpc_url or config["rpc_url"],
        block_explorer_url=config["block_explorer_url"],
        native_currency=dict(NATIVE_CURRENCY),
    )


def classify_provider_error(error: Exception) -> Optional[DeploymentError]:
    """
    Recognize user rejection and insufficient funds in a provider error.

    Providers report these as error codes or only in message text, so both
    are checked.

    Returns:
        The matching DeploymentError, or None if the error is not recognized
    """
    code = getattr(error, "code", None)
    message = str(error)
    if error.args and isinstance(error.args[0], dict):
        code = error.args[0].get("code", code)
        message = str(error.args[0].get("message", message))

    lowered = message.lower()
    if code == USER_REJECTED_CODE or "user rejected" in lowered or "user denied" in lowered:
        return TransactionRejectedError("Transaction rejected in wallet")
    if "insufficient funds" in lowered:
        return InsufficientFundsError("Insufficient funds to pay for deployment")
    return None


def _coerce_argument(abi_type: str, value: Any) -> Any:
    if abi_type.startswith(("uint", "int")) and not abi_type.endswith("]"):
        if isinstance(value, int):
            return value
        text = str(value).strip()
        return int(text, 16) if text.lower().startswith("0x") else int(text)
    if abi_type == "address":
        return validate_address(value)
    if abi_type == "bool" and isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return value


def coerce_constructor_args(
    abi: List[Dict[str, Any]], args: Sequence[Any]
) -> List[Any]:
    """
    Convert resolved argument values to the Python types web3 encodes.

    Integers may arrive as decimal or hex strings, addresses in any casing.

    Raises:
        InvalidInputError: If a value cannot be converted for its parameter
    """
    constructor = next((item for item in abi if item.get("type") == "constructor"), None)
    inputs = (constructor or {}).get("inputs", [])
    if len(inputs) != len(args):
        raise InvalidInputError(
            f"Constructor expects {len(inputs)} arguments, got {len(args)}"
        )

    coerced = []
    for item, value in zip(inputs, args):
        try:
            coerced.append(_coerce_argument(item["type"], value))
        except (ValueError, InvalidAddressError) as e:
            raise InvalidInputError(
                f"Cannot use {value!r} for constructor parameter "
                f"'{item.get('name', '')}' of type {item['type']}"
            ) from e
    return coerced


class Web3WalletProvider:
    """
    Wallet holding one local private key.

    A web3 connection is opened per call against the RPC endpoint of the
    active chain. The approve hook stands in for the confirmation prompts of
    a browser wallet; without one every request is approved.
    """

    def __init__(
        self,
        private_key: str,
        network: str = "base-sepolia",
        rpc_urls: Optional[Dict[str, str]] = None,
        approve: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize the wallet.

        Args:
            private_key: Hex private key of the deployer account
            network: Network the wallet starts on
            rpc_urls: Known RPC endpoints by network name; the starting
                      network falls back to its public endpoint
            approve: Callback asked before switching, adding networks and
                     signing; returning False rejects the request

        Raises:
            ValueError: If the key or the starting network is invalid
        """
        if network not in NETWORK_CONFIG:
            raise ValueError(f"Unknown network: {network}")

        self._account = Account.from_key(private_key)
        self._approve = approve
        self._rpc_urls: Dict[int, str] = {}
        for name, url in (rpc_urls or {}).items():
            if name not in NETWORK_CONFIG:
                raise ValueError(f"Unknown network: {name}")
            self._rpc_urls[NETWORK_CONFIG[name]["chain_id"]] = url

        self._chain_id = NETWORK_CONFIG[network]["chain_id"]
        self._rpc_urls.setdefault(self._chain_id, NETWORK_CONFIG[network]["rpc_url"])

    def _approved(self, action: str) -> bool:
        if self._approve is None:
            return True
        return bool(self._approve(action))

    def _web3(self) -> Web3:
        return Web3(Web3.HTTPProvider(self._rpc_urls[self._chain_id]))

    def get_active_address(self) -> Optional[str]:
        return self._account.address

    def get_chain_id(self) -> int:
        return self._chain_id

    def request_network_switch(self, chain_id: int) -> SwitchResult:
        if chain_id == self._chain_id:
            return SwitchResult.OK
        if chain_id not in self._rpc_urls:
            return SwitchResult.UNKNOWN_NETWORK
        if not self._approved(f"Switch network to chain {chain_id}"):
            return SwitchResult.REJECTED
        self._chain_id = chain_id
        logger.debug("Wallet switched to chain %s", chain_id)
        return SwitchResult.OK

    def request_add_network(self, descriptor: NetworkDescriptor) -> bool:
        if not self._approved(
            f"Add network {descriptor.chain_name} ({descriptor.chain_id})"
        ):
            return False
        self._rpc_urls[descriptor.chain_id] = descriptor.rpc_url
        return True

    def deploy_contract(
        self, abi: List[Dict[str, Any]], bytecode: str, args: Sequence[Any]
    ) -> PendingTransaction:
        """
        Sign and submit a contract-creation transaction.

        Raises:
            InvalidInputError: If an argument does not fit its parameter type
            TransactionRejectedError: If the approve hook declines signing
            InsufficientFundsError: If the node reports insufficient funds
        """
        coerced = coerce_constructor_args(abi, args)
        if not self._approved(f"Sign contract deployment on chain {self._chain_id}"):
            raise TransactionRejectedError("Transaction rejected in wallet")

        w3 = self._web3()
        contract = w3.eth.contract(abi=abi, bytecode=bytecode)
        address = self._account.address
        try:
            tx = contract.constructor(*coerced).build_transaction(
                {
                    "from": address,
                    "nonce": w3.eth.get_transaction_count(address),
                    "chainId": self._chain_id,
                }
            )
            signed = self._account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        except (ValueError, Web3Exception) as e:
            classified = classify_provider_error(e)
            if classified is not None:
                raise classified from e
            raise

        return PendingTransaction(transaction_hash=Web3.to_hex(tx_hash))

    def await_confirmation(
        self, pending: PendingTransaction, timeout: float
    ) -> Confirmation:
        """
        Wait for the creation receipt.

        Raises:
            ConfirmationTimeoutError: If no receipt arrives within timeout
            UnknownError: If the transaction reverted
        """
        w3 = self._web3()
        try:
            receipt = w3.eth.wait_for_transaction_receipt(
                pending.transaction_hash, timeout=timeout
            )
        except TimeExhausted as e:
            raise ConfirmationTimeoutError(
                f"Transaction {pending.transaction_hash} not confirmed after {timeout}s",
                transaction_hash=pending.transaction_hash,
            ) from e

        if receipt.get("status") == 0:
            raise UnknownError(f"Deployment transaction {pending.transaction_hash} reverted")

        return Confirmation(
            contract_address=validate_address(receipt["contractAddress"]),
            transaction_hash=pending.transaction_hash,
        )
