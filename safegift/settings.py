import os

from dotenv import load_dotenv

load_dotenv()

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Enum.Operation
CALL = 0
DELEGATE_CALL = 1

SAFE_THRESHOLD = 2

# Mainnet block the scenario suite is pinned to
DEFAULT_FORK_BLOCK = 18127149

HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"
HARDHAT_ACCOUNT_PATH = "m/44'/60'/0'/0"


def fork_url():
    """
    Archive RPC endpoint to fork from, None when not configured
    """
    return os.getenv("ETH_URL") or os.getenv("PROVIDER_URL") or None


def fork_block_number():
    value = os.getenv("FORK_BLOCK_NUMBER")
    if not value:
        return DEFAULT_FORK_BLOCK
    return int(value)


def mnemonic():
    return os.getenv("HARDHAT_MNEMONIC", HARDHAT_MNEMONIC)


def account_path(index):
    return f"{HARDHAT_ACCOUNT_PATH}/{index}"
