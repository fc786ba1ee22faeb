"""Conversation state machine driving contract generation and deployment."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Protocol

from .addresses import validate_address
from .constants import NETWORK_CONFIG
from .deployment import DeploymentCoordinator
from .exceptions import (
    CompilationFailedError,
    ContractChatError,
    ConversationBusyError,
    ErrorKind,
    InvalidAddressError,
    InvalidInputError,
    ServiceUnavailableError,
    UnknownError,
)
from .extraction import extract_solidity_source
from .types import (
    ChatMessage,
    ContractRequest,
    ConversationStep,
    DeploymentRecord,
    Notice,
    Turn,
)
from .wallet import WalletProvider

logger = logging.getLogger(__name__)

NETWORK_PROMPT = "Which network would you like to deploy to? (base-mainnet or base-sepolia)"
NETWORK_REPROMPT = 'Please enter either "base-mainnet" or "base-sepolia" as the network.'
OWNER_PROMPT = "Great! Now, please enter your wallet address that will be the owner of the contract."
WALLET_OWNER_PROMPT = (
    "Connected wallet detected: {address}\n\n"
    "Would you like to use this address as the contract owner? "
    "Type 'yes' to confirm, or enter a different address."
)
OWNER_REPROMPT = (
    "Please enter a valid Ethereum address (0x followed by 40 hex characters)"
    "{wallet_hint}."
)
DESCRIPTION_PROMPT = (
    "Please describe the contract you want to create in as much detail as possible: "
    "what it does, who can call what, token names, amounts and addresses."
)
REVIEW_MESSAGE = (
    "Here is your contract for review:\n\n```solidity\n{source}\n```\n\n"
    "Please review the contract carefully before deploying."
)
REVIEW_REPROMPT = "Your contract is ready. Use the deploy action to deploy it to {network}."
DEPLOYED_REPROMPT = "Your contract is deployed. Use the restart action to create another one."
DEPLOYED_MESSAGE = (
    "Contract successfully deployed!\n\n"
    "Contract Name: `{record.name}`\n"
    "Contract Address: `{record.address}`\n"
    "Network: {record.network}\n"
    "Deployed by: `{record.deployed_by}`\n"
    "Transaction: `{record.transaction_hash}`\n\n"
    "You can interact with your contract using the deployed address and ABI."
)


class Generator(Protocol):
    def generate(self, history: Iterable[ChatMessage]) -> str:
        ...


def notice_for(error: ContractChatError) -> Notice:
    """Turn an error into the notice shown to the user."""
    if isinstance(error, CompilationFailedError):
        return Notice(error.kind, f"Compilation error: {error.details}")
    if error.kind == ErrorKind.UNKNOWN:
        return Notice(error.kind, "Something went wrong. Please try again.")
    return Notice(error.kind, str(error))


class Conversation:
    """
    One user's contract conversation.

    Each action runs to completion before the next is accepted; busy is
    True while one is running, and an action arriving meanwhile raises
    ConversationBusyError without touching any state.
    """

    def __init__(
        self,
        generator: Generator,
        coordinator: DeploymentCoordinator,
        wallet: Optional[WalletProvider] = None,
    ):
        """
        Initialize the conversation.

        Args:
            generator: Object with generate(history) -> response text
            coordinator: Runs the deploy action
            wallet: Used to offer the connected account as contract owner
        """
        self.generator = generator
        self.coordinator = coordinator
        self.wallet = wallet
        self._lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self.step = ConversationStep.NETWORK_SELECTION
        self.request = ContractRequest()
        self.messages: List[ChatMessage] = [ChatMessage("assistant", NETWORK_PROMPT)]
        self.last_record: Optional[DeploymentRecord] = None
        self._wallet_offered = False

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def _action(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ConversationBusyError("Another action is still in progress")
        try:
            yield
        finally:
            self._lock.release()

    def _advance(self, step: ConversationStep) -> None:
        logger.debug("Conversation step %s -> %s", self.step.value, step.value)
        self.step = step

    def _reply(self, content: str) -> Turn:
        self.messages.append(ChatMessage("assistant", content))
        return Turn(step=self.step, message=content)

    def _notice(self, error: ContractChatError) -> Turn:
        return Turn(step=self.step, notice=notice_for(error))

    def _wallet_address(self) -> Optional[str]:
        if self.wallet is None:
            return None
        try:
            return validate_address(self.wallet.get_active_address() or "")
        except InvalidAddressError:
            return None
        except Exception:
            logger.warning("Could not read the connected wallet account", exc_info=True)
            return None

    def start(self) -> Turn:
        """Return the assistant message that opens the current conversation."""
        return Turn(step=self.step, message=self.messages[0].content)

    def submit(self, text: str) -> Turn:
        """
        Handle one free-text message from the user.

        Args:
            text: The user's message

        Returns:
            Turn with the assistant's reply or a notice

        Raises:
            ConversationBusyError: If another action is still running
        """
        with self._action():
            text = (text or "").strip()
            if not text:
                return self._notice(InvalidInputError("Please enter a message"))

            self.messages.append(ChatMessage("user", text))
            if self.step == ConversationStep.NETWORK_SELECTION:
                return self._handle_network(text)
            if self.step == ConversationStep.OWNER_ADDRESS:
                return self._handle_owner(text)
            if self.step == ConversationStep.CONTRACT_DESCRIPTION:
                return self._handle_description(text)
            if self.step == ConversationStep.REVIEW:
                return self._reply(REVIEW_REPROMPT.format(network=self.request.network))
            return self._reply(DEPLOYED_REPROMPT)

    def _handle_network(self, text: str) -> Turn:
        network = text.lower()
        if network not in NETWORK_CONFIG:
            return self._reply(NETWORK_REPROMPT)

        self.request.assign(network=network)
        self._advance(ConversationStep.OWNER_ADDRESS)

        detected = self._wallet_address()
        self._wallet_offered = detected is not None
        if detected:
            return self._reply(WALLET_OWNER_PROMPT.format(address=detected))
        return self._reply(OWNER_PROMPT)

    def _handle_owner(self, text: str) -> Turn:
        if text.lower() == "yes":
            # Ask the wallet again; the account may have changed since the offer
            candidate = self._wallet_address()
        else:
            candidate = text

        try:
            owner = validate_address(candidate or "")
        except InvalidAddressError as e:
            hint = ", or type 'yes' to use your connected wallet" if self._wallet_offered else ""
            turn = self._reply(OWNER_REPROMPT.format(wallet_hint=hint))
            return replace(turn, notice=notice_for(e))

        self.request.assign(owner_address=owner)
        self._advance(ConversationStep.CONTRACT_DESCRIPTION)
        return self._reply(DESCRIPTION_PROMPT)

    def _handle_description(self, text: str) -> Turn:
        try:
            response = self.generator.generate(list(self.messages))
        except ContractChatError as e:
            self.messages.pop()
            logger.info("Contract generation failed: %s", e)
            return self._notice(e)
        except Exception:
            self.messages.pop()
            logger.exception("Unexpected failure during contract generation")
            return self._notice(UnknownError("Contract generation failed"))

        source = extract_solidity_source(response).strip()
        if not source:
            self.messages.pop()
            return self._notice(
                ServiceUnavailableError("The generator returned no contract. Please try again.")
            )

        self.request.assign(description=text, contract_type="Custom", source_code=source)
        self._advance(ConversationStep.REVIEW)
        return self._reply(REVIEW_MESSAGE.format(source=source))

    def deploy(self) -> Turn:
        """
        Handle the deploy action.

        A failed attempt keeps the conversation in review so it can be
        retried without describing the contract again.

        Raises:
            ConversationBusyError: If another action is still running
        """
        with self._action():
            if self.step != ConversationStep.REVIEW:
                return self._notice(InvalidInputError("There is no contract ready to deploy"))

            try:
                record = self.coordinator.deploy(self.request)
            except ContractChatError as e:
                logger.info("Deployment failed (%s): %s", e.kind.value, e)
                return self._notice(e)

            self.last_record = record
            self._advance(ConversationStep.DEPLOYED)
            return self._reply(DEPLOYED_MESSAGE.format(record=record))

    def restart(self) -> Turn:
        """
        Handle the restart action, available once a contract is deployed.

        Raises:
            ConversationBusyError: If another action is still running
        """
        with self._action():
            if self.step != ConversationStep.DEPLOYED:
                return self._notice(
                    InvalidInputError("Restart is available once the contract is deployed")
                )

            self._reset()
            return self.start()
