import abc
import logging
import sqlite3
from pathlib import Path

from eth_typing import BlockNumber, HexStr

from deposit_operator.deposits.typings import CachedDeposits

logger = logging.getLogger(__name__)


class BaseDepositsCache(abc.ABC):
    @abc.abstractmethod
    async def load_cached_deposits(self, chain_id: int, start_block: BlockNumber) -> CachedDeposits:
        """
        Returns the public keys deposited since the start block
        and the last block the cache is complete up to.
        """


class EmptyDepositsCache(BaseDepositsCache):
    async def load_cached_deposits(self, chain_id: int, start_block: BlockNumber) -> CachedDeposits:
        return CachedDeposits(public_keys=[], last_block=start_block)


class DepositsCacheCrud(BaseDepositsCache):
    """
    Reads deposits cache maintained by an external indexer.
    The database is opened in read-only mode.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    @staticmethod
    def get_table_name(chain_id: int) -> str:
        return f'chain_{chain_id}_deposits'

    def get_db_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(f'file:{self.db_path}?mode=ro', uri=True)

    async def load_cached_deposits(self, chain_id: int, start_block: BlockNumber) -> CachedDeposits:
        empty_cache = CachedDeposits(public_keys=[], last_block=start_block)
        if not self.db_path.is_file():
            logger.info('Deposits cache %s not found', self.db_path)
            return empty_cache

        table = self.get_table_name(chain_id)
        with self.get_db_connection() as conn:
            if not self._table_exists(conn, table):
                logger.info('Deposits cache for chain %d is empty', chain_id)
                return empty_cache

            rows = conn.execute(
                f'''SELECT public_key, block_number FROM {table}
                    WHERE block_number >= ? ORDER BY block_number''',
                (start_block,),
            ).fetchall()

        if not rows:
            return empty_cache

        return CachedDeposits(
            public_keys=[HexStr(row[0]) for row in rows],
            last_block=BlockNumber(max(start_block, rows[-1][1])),
        )

    @staticmethod
    def _table_exists(conn: sqlite3.Connection, table: str) -> bool:
        res = conn.execute(
            'SELECT name FROM sqlite_master WHERE type = ? AND name = ?', ('table', table)
        )
        return res.fetchone() is not None
