import sqlite3
from pathlib import Path

import pytest

from deposit_operator.config.settings import settings
from deposit_operator.deposits.cache import DepositsCacheCrud, EmptyDepositsCache
from deposit_operator.deposits.execution import get_deposits_cache


@pytest.mark.usefixtures('fake_settings')
class TestGetDepositsCache:
    def test_missing_database(self):
        assert not settings.cache_db.exists()
        assert isinstance(get_deposits_cache(), EmptyDepositsCache)

    def test_existing_database(self, data_dir: Path):
        with sqlite3.connect(settings.cache_db) as conn:
            conn.execute('CREATE TABLE chain_100_deposits (public_key TEXT, block_number INT)')
        conn.close()

        deposits_cache = get_deposits_cache()

        assert isinstance(deposits_cache, DepositsCacheCrud)
        assert deposits_cache.db_path == settings.cache_db
        assert settings.cache_db.parent == data_dir
