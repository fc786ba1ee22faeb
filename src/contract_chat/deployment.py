"""Deployment pipeline: compile, resolve arguments, sign, confirm, persist."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from .addresses import validate_address
from .constants import (
    DEFAULT_CONFIRMATION_ATTEMPTS,
    DEFAULT_CONFIRMATION_TIMEOUT,
    NETWORK_CONFIG,
)
from .exceptions import (
    ConfirmationTimeoutError,
    ContractChatError,
    InvalidAddressError,
    InvalidInputError,
    NetworkSwitchRejectedError,
    TransactionRejectedError,
    UnknownError,
    WalletNotConnectedError,
)
from .resolver import ConstructorArgumentResolver
from .storage import DeploymentStore
from .types import (
    CompiledArtifact,
    Confirmation,
    ContractRequest,
    DeploymentRecord,
    PendingTransaction,
    SwitchResult,
)
from .wallet import WalletProvider, classify_provider_error, network_descriptor

logger = logging.getLogger(__name__)


class Compiler(Protocol):
    def compile(self, source: str) -> CompiledArtifact:
        ...


class DeploymentCoordinator:
    """Drives one deployment attempt from source code to a stored record."""

    def __init__(
        self,
        wallet: Optional[WalletProvider],
        compiler: Compiler,
        store: Optional[DeploymentStore] = None,
        resolver: Optional[ConstructorArgumentResolver] = None,
        ensure_network: bool = True,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        confirmation_attempts: int = DEFAULT_CONFIRMATION_ATTEMPTS,
        rpc_urls: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            wallet: Wallet capability, or None if no wallet is connected
            compiler: Object with compile(source) -> CompiledArtifact
            store: Where confirmed deployments are appended (None to skip)
            resolver: Constructor argument resolver (defaults to heuristics)
            ensure_network: Switch the wallet to the requested network first
            confirmation_timeout: Seconds to wait per confirmation attempt
            confirmation_attempts: Confirmation waits before giving up
            rpc_urls: RPC endpoints by network name offered when the wallet
                      has to add a network

        Raises:
            ValueError: If confirmation_attempts is less than 1
        """
        if confirmation_attempts < 1:
            raise ValueError("confirmation_attempts must be at least 1")

        self.wallet = wallet
        self.compiler = compiler
        self.store = store
        self.resolver = resolver or ConstructorArgumentResolver()
        self.ensure_network = ensure_network
        self.confirmation_timeout = confirmation_timeout
        self.confirmation_attempts = confirmation_attempts
        self.rpc_urls = dict(rpc_urls or {})

    def _signer_address(self) -> str:
        if self.wallet is None:
            raise WalletNotConnectedError("Please connect your wallet first")
        try:
            address = self.wallet.get_active_address()
        except ContractChatError:
            raise
        except Exception as e:
            raise self._translate(e, "read the wallet account") from e
        if not address:
            raise WalletNotConnectedError("Please connect your wallet first")
        try:
            return validate_address(address)
        except InvalidAddressError as e:
            raise WalletNotConnectedError(f"Wallet reported an invalid account: {address}") from e

    def _switch_network(self, network: str) -> None:
        if network not in NETWORK_CONFIG:
            raise InvalidInputError(f"Unknown network: {network}")

        target = NETWORK_CONFIG[network]["chain_id"]
        if self.wallet.get_chain_id() == target:
            return

        logger.debug("Requesting wallet switch to %s (%s)", network, target)
        result = self.wallet.request_network_switch(target)
        if result == SwitchResult.UNKNOWN_NETWORK:
            descriptor = network_descriptor(network, self.rpc_urls.get(network))
            if not self.wallet.request_add_network(descriptor):
                raise NetworkSwitchRejectedError(f"Adding network {network} was rejected")
            result = self.wallet.request_network_switch(target)

        if result != SwitchResult.OK:
            raise NetworkSwitchRejectedError(f"Switching to {network} was rejected")

    def _await_confirmation(self, pending: PendingTransaction) -> Confirmation:
        for attempt in range(1, self.confirmation_attempts + 1):
            try:
                return self.wallet.await_confirmation(pending, self.confirmation_timeout)
            except ConfirmationTimeoutError:
                logger.warning(
                    "Transaction %s unconfirmed after attempt %d/%d",
                    pending.transaction_hash,
                    attempt,
                    self.confirmation_attempts,
                )

        raise ConfirmationTimeoutError(
            f"Transaction {pending.transaction_hash} was not confirmed; "
            "check it in a block explorer before deploying again",
            transaction_hash=pending.transaction_hash,
        )

    def _translate(self, error: Exception, action: str) -> ContractChatError:
        classified = classify_provider_error(error)
        if classified is not None:
            return classified
        logger.exception("Unexpected failure while trying to %s", action)
        return UnknownError("Failed to deploy contract")

    def _persist(self, record: DeploymentRecord) -> None:
        if self.store is None:
            return
        try:
            self.store.append(record)
        except (OSError, ContractChatError):
            # The contract is on chain either way
            logger.exception("Could not store deployment record for %s", record.address)

    def deploy(self, request: ContractRequest) -> DeploymentRecord:
        """
        Deploy the contract held by a completed request.

        Every call recompiles; nothing is cached between attempts.

        Args:
            request: Request with network and source_code set

        Returns:
            DeploymentRecord of the confirmed deployment

        Raises:
            WalletNotConnectedError: If no wallet account is available
            NetworkSwitchRejectedError: If the wallet will not change network
            CompilationFailedError: If the source does not compile
            TransactionRejectedError: If signing is declined
            InsufficientFundsError: If the signer cannot pay
            ConfirmationTimeoutError: If confirmation never arrives
            InvalidInputError: If the request or the arguments are incomplete
            UnknownError: For anything else
        """
        if not request.source_code or not request.network:
            raise InvalidInputError("There is no contract to deploy yet")

        self._signer_address()

        if self.ensure_network:
            try:
                self._switch_network(request.network)
            except ContractChatError:
                raise
            except Exception as e:
                error = self._translate(e, "switch network")
                if isinstance(error, TransactionRejectedError):
                    error = NetworkSwitchRejectedError(
                        f"Switching to {request.network} was rejected"
                    )
                raise error from e

        # Re-read after a possible switch
        signer = self._signer_address()

        try:
            artifact = self.compiler.compile(request.source_code)
        except ContractChatError:
            raise
        except Exception as e:
            raise self._translate(e, "compile contract") from e

        args: List[Any] = self.resolver.resolve(
            artifact.constructor_inputs,
            signer,
            request.description,
            artifact.name,
        )
        logger.debug("Deploying %s with args %s", artifact.name, args)

        try:
            pending = self.wallet.deploy_contract(artifact.abi, artifact.bytecode, args)
            confirmation = self._await_confirmation(pending)
        except ContractChatError:
            raise
        except Exception as e:
            raise self._translate(e, "deploy contract") from e

        config = NETWORK_CONFIG[request.network]
        record = DeploymentRecord(
            address=confirmation.contract_address,
            network=request.network,
            name=artifact.name,
            abi=artifact.abi,
            deployed_by=signer,
            transaction_hash=confirmation.transaction_hash,
            chain_id=config["chain_id"],
            url=f"{config['block_explorer_url']}/address/{confirmation.contract_address}",
            constructor_args=list(args),
            deployed_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
        )
        self._persist(record)

        logger.info(
            "Deployed %s at %s on %s (tx %s)",
            record.name,
            record.address,
            record.network,
            record.transaction_hash,
        )
        return record
