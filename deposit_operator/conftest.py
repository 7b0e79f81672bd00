from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Generator

import pytest
from click.testing import CliRunner
from eth_typing import ChecksumAddress
from sw_utils.tests import faker

from deposit_operator.config.networks import GNOSIS, NETWORKS, NetworkConfig
from deposit_operator.config.settings import settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    data_dir = temp_dir / 'data'
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def network_config() -> NetworkConfig:
    return NETWORKS[GNOSIS]


@pytest.fixture
def owner_address() -> ChecksumAddress:
    return faker.eth_address()


@pytest.fixture
def execution_endpoints() -> str:
    return 'https://rpc.gnosischain.com'


@pytest.fixture
def fake_settings(data_dir: Path, execution_endpoints: str) -> None:
    settings.set(
        network=GNOSIS,
        data_dir=data_dir,
        execution_endpoints=execution_endpoints,
    )
