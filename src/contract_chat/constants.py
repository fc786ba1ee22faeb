"""Configuration constants for contract-chat library."""

# Supported networks, keyed by the identifier the user types
# Chain data follows ethereum-lists/chains
NETWORK_CONFIG = {
    "base-mainnet": {
        "chain_id": 8453,
        "chain_name": "Base",
        "rpc_url": "https://mainnet.base.org",
        "block_explorer_url": "https://basescan.org",
        "default_rpc_env": "BASE_MAINNET_RPC_URL",
    },
    "base-sepolia": {
        "chain_id": 84532,
        "chain_name": "Base Sepolia",
        "rpc_url": "https://sepolia.base.org",
        "block_explorer_url": "https://sepolia.basescan.org",
        "default_rpc_env": "BASE_SEPOLIA_RPC_URL",
    },
}

NATIVE_CURRENCY = {"name": "Ether", "symbol": "ETH", "decimals": 18}

# One million tokens at 18 decimals
DEFAULT_TOKEN_SUPPLY = str(10**24)

# Compiler settings
DEFAULT_SOLC_VERSION = "0.8.24"
DEFAULT_EVM_VERSION = "paris"
DEFAULT_OPTIMIZER_RUNS = 200
SOURCE_UNIT_NAME = "contract.sol"

# Import prefixes resolved from the local contract library
IMPORT_WHITELIST = ("@openzeppelin/",)

# Generation service defaults
DEFAULT_GENERATION_URL = "https://api.x.ai/v1/chat/completions"
DEFAULT_GENERATION_MODEL = "grok-beta"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000
DEFAULT_REQUEST_TIMEOUT = 60

# Confirmation wait bounds (seconds per attempt, attempts)
DEFAULT_CONFIRMATION_TIMEOUT = 120
DEFAULT_CONFIRMATION_ATTEMPTS = 3

# Deployment store layout
STORAGE_KEY = "deployedContracts"
STORE_SCHEMA_VERSION = 1

SYSTEM_PROMPT = """You write complete Solidity smart contracts from a user's description.
Target Solidity 0.8.24 and @openzeppelin/contracts 4.9.5.

Rules for the generated source:
1. Pin the compiler with `pragma solidity 0.8.24;` and start with an SPDX license line.
2. Import OpenZeppelin by package path, for example:
   import "@openzeppelin/contracts/token/ERC20/ERC20.sol";
   import "@openzeppelin/contracts/access/Ownable.sol";
   import "@openzeppelin/contracts/security/ReentrancyGuard.sol";
3. ERC20 tokens use exactly this constructor shape:
   constructor() ERC20("TokenName", "SYMBOL") Ownable() { ... }
4. Other contracts inheriting Ownable use:
   constructor() Ownable() { ... }
5. Every integer is uint256. Addresses are address, flags are bool, text is string.
6. Read ETH balances as `uint256 balance = address(this).balance;`.
7. Declare custom errors first, then events, then state.
8. Emit an event for every state change and guard access with modifiers.
9. Token amounts use 18 decimals (1 token = 1e18).

Return the whole contract in a single ```solidity fenced code block."""
