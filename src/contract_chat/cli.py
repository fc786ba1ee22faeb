"""Terminal front-end for a contract conversation."""

import logging
import os
import sys

from .compilation import SolcCompiler
from .config import Settings
from .conversation import Conversation
from .deployment import DeploymentCoordinator
from .exceptions import StoreCorruptedError
from .generation import GenerationClient
from .storage import DeploymentStore
from .types import Turn
from .wallet import Web3WalletProvider

logger = logging.getLogger(__name__)

HELP = "Commands: /deploy, /restart, /history, /examples, /quit"

# Description templates; replace the {PLACEHOLDERS} before sending
EXAMPLE_PROMPTS = [
    (
        "Simple ETH forwarder",
        'Write a smart contract that can receive ETH on base-sepolia and forward it to "{YOUR_ADDRESS}"',
    ),
    (
        "Basic ERC20 token",
        'Create an ERC20 token on base-sepolia and name it "{TOKEN_NAME}" with a supply of {SUPPLY}',
    ),
    (
        "ETH splitter",
        "Write a smart contract that can receive ETH on base-sepolia and send the received ETH "
        '90% to "{ADDRESS_A}" and 10% to "{ADDRESS_B}"',
    ),
    (
        "Auto-minting token",
        'Create an ERC20 token on base-sepolia and name it "{TOKEN_NAME}" with an initial supply '
        "of 1,000,000 and max supply of 10,000,000. Every 0.01 ETH the token contract receives "
        "mints 1,000,000 more to the sender, never exceeding the max total supply.",
    ),
]


def _confirm(action: str) -> bool:
    answer = input(f"[wallet] {action}? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def _show(turn: Turn) -> None:
    if turn.message:
        print(f"\n{turn.message}\n")
    if turn.notice:
        print(f"\n[{turn.notice.kind.value}] {turn.notice.message}\n")


def _show_examples() -> None:
    for number, (title, template) in enumerate(EXAMPLE_PROMPTS, start=1):
        print(f"{number}. {title}\n   {template}\n")


def _show_history(conversation: Conversation) -> None:
    try:
        records = conversation.coordinator.store.records()
    except StoreCorruptedError as e:
        print(f"\n[store-corrupted] {e}\n")
        return
    if not records:
        print("No deployments yet.")
    for record in records:
        print(f"{record.network}  {record.name}  {record.address}  {record.url or ''}")


def build_conversation(settings: Settings) -> Conversation:
    """Wire the production collaborators from settings."""
    wallet = None
    if settings.deployer_private_key:
        wallet = Web3WalletProvider(
            settings.deployer_private_key,
            rpc_urls=settings.rpc_urls,
            approve=_confirm,
        )
    else:
        logger.warning("DEPLOYER_PRIVATE_KEY not set; deployment will be unavailable")

    coordinator = DeploymentCoordinator(
        wallet,
        SolcCompiler(settings.solc_version, settings.library_root),
        store=DeploymentStore(settings.store_path),
        confirmation_timeout=settings.confirmation_timeout,
        confirmation_attempts=settings.confirmation_attempts,
        rpc_urls=settings.rpc_urls,
    )
    generator = GenerationClient(
        settings.xai_api_key,
        url=settings.generation_url,
        model=settings.generation_model,
    )
    return Conversation(generator, coordinator, wallet=wallet)


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("CONTRACT_CHAT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    try:
        settings.validate()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    conversation = build_conversation(settings)
    print(HELP)
    _show(conversation.start())

    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        command = line.strip().lower()
        if command == "/quit":
            return 0
        if command == "/help":
            print(HELP)
            continue
        if command == "/history":
            _show_history(conversation)
            continue
        if command == "/examples":
            _show_examples()
            continue

        if command == "/deploy":
            print("Deploying, please wait...")
            turn = conversation.deploy()
        elif command == "/restart":
            turn = conversation.restart()
        else:
            turn = conversation.submit(line)
        _show(turn)


if __name__ == "__main__":
    sys.exit(main())
