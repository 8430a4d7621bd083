import logging

from safegift import settings
from safegift.exceptions import ForkError

logger = logging.getLogger(__name__)


def _request(web3, method, params):
    response = web3.provider.make_request(method, params)
    if response.get("error"):
        raise ForkError(f"{method} failed: {response['error']}")
    return response.get("result")


def fork_specific_state(web3, url=None, block_number=None):
    """
    Reset the local Hardhat node to a fork of `url` at `block_number`
    """
    url = url or settings.fork_url()
    if not url:
        raise ForkError("set ETH_URL (or PROVIDER_URL) to fork from")
    if block_number is None:
        block_number = settings.fork_block_number()
    logger.info("forking at block %d", block_number)
    return _request(
        web3,
        "hardhat_reset",
        [{"forking": {"jsonRpcUrl": url, "blockNumber": block_number}}],
    )


def latest_timestamp(web3):
    return web3.eth.get_block("latest")["timestamp"]


def increase_time(web3, seconds):
    _request(web3, "evm_increaseTime", [seconds])
    _request(web3, "evm_mine", [])
    return latest_timestamp(web3)


def set_next_block_timestamp(web3, timestamp):
    """
    Pin the timestamp of the next mined block
    """
    return _request(web3, "evm_setNextBlockTimestamp", [timestamp])
