import asyncio
import logging

from eth_typing import BlockNumber, HexStr
from web3 import Web3
from web3.types import EventData

from deposit_operator.common.contracts import DepositContract
from deposit_operator.common.utils import format_error
from deposit_operator.config.networks import NetworkConfig
from deposit_operator.deposits.cache import BaseDepositsCache
from deposit_operator.deposits.exceptions import HistoryFetchError
from deposit_operator.deposits.observers import PipelineObserver
from deposit_operator.deposits.typings import ReconciledSet

logger = logging.getLogger(__name__)

# JSON-RPC "limit exceeded" error code used by geth, nethermind, infura, alchemy
LIMIT_EXCEEDED_ERROR_CODE = -32005

RANGE_LIMIT_ERROR_MESSAGES = (
    'query returned more than',
    'too many results',
    'limit exceeded',
    'response size exceeded',
    'block range',
    'timeout',
    'timed out',
)


def is_range_limit_error(e: Exception) -> bool:
    """Checks whether the provider failed because the blocks range is too large."""
    if isinstance(e, asyncio.TimeoutError):
        return True

    rpc_error = (getattr(e, 'rpc_response', None) or {}).get('error')
    for error in (rpc_error, *e.args):
        if isinstance(error, dict) and error.get('code') == LIMIT_EXCEEDED_ERROR_CODE:
            return True

    message = str(e).lower()
    return any(m in message for m in RANGE_LIMIT_ERROR_MESSAGES)


class DepositHistoryReconciler:
    """
    Merges the cached deposited public keys with the deposit events
    emitted since the cache checkpoint.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        deposits_cache: BaseDepositsCache,
        deposit_contract: DepositContract,
        blocks_range: int,
        observer: PipelineObserver | None = None,
    ) -> None:
        self.network_config = network_config
        self.deposits_cache = deposits_cache
        self.deposit_contract = deposit_contract
        self.blocks_range = blocks_range
        self.observer = observer or PipelineObserver()

    async def reconcile(self) -> ReconciledSet:
        chain_id = self.network_config.CHAIN_ID
        start_block = self.network_config.DEPOSIT_START_BLOCK
        self.observer.reconciliation_started(chain_id, start_block)

        cached_deposits = await self.deposits_cache.load_cached_deposits(chain_id, start_block)
        to_block = await self.deposit_contract.get_block_number()

        # the checkpoint block is fetched again, the union makes it idempotent
        public_keys = await self.fetch_public_keys(
            from_block=cached_deposits.last_block, to_block=to_block
        )
        logger.debug(
            'Loaded %d cached and fetched %d new deposits',
            len(cached_deposits.public_keys),
            len(public_keys),
        )

        reconciled = (
            ReconciledSet()
            .extend(cached_deposits.public_keys, cached_deposits.last_block)
            .extend(public_keys, BlockNumber(max(to_block, cached_deposits.last_block)))
        )
        self.observer.reconciliation_finished(chain_id, reconciled)
        return reconciled

    async def fetch_public_keys(
        self, from_block: BlockNumber, to_block: BlockNumber
    ) -> list[HexStr]:
        """Fetches the public keys of the deposit events in the inclusive blocks range."""
        public_keys: list[HexStr] = []
        while to_block >= from_block:
            chunk_to_block = BlockNumber(min(from_block + self.blocks_range - 1, to_block))
            events = await self._get_events(from_block, chunk_to_block)
            public_keys.extend(Web3.to_hex(event['args']['pubkey']) for event in events)
            from_block = BlockNumber(chunk_to_block + 1)

        return public_keys

    async def _get_events(self, from_block: BlockNumber, to_block: BlockNumber) -> list[EventData]:
        try:
            return await self.deposit_contract.get_deposit_events(from_block, to_block)
        except Exception as e:
            if from_block >= to_block or not is_range_limit_error(e):
                logger.error(
                    'Failed to fetch deposit events for blocks %d - %d: %s',
                    from_block,
                    to_block,
                    format_error(e),
                )
                raise HistoryFetchError(from_block, to_block) from e

            middle = BlockNumber((from_block + to_block) // 2)
            logger.debug(
                'Too many deposit events for blocks %d - %d, splitting at %d',
                from_block,
                to_block,
                middle,
            )

        first_half_events = await self._get_events(from_block, middle)
        second_half_events = await self._get_events(BlockNumber(middle + 1), to_block)
        return first_half_events + second_half_events
