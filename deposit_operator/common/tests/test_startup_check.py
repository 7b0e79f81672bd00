from unittest import mock

import click
import pytest

from deposit_operator.common.startup_check import check_execution_network
from deposit_operator.config.networks import NetworkConfig


def _mock_execution_client(chain_id: int) -> mock.Mock:
    client = mock.Mock()

    async def get_chain_id() -> int:
        return chain_id

    type(client.eth).chain_id = mock.PropertyMock(side_effect=get_chain_id)
    return client


@pytest.mark.usefixtures('fake_settings')
class TestCheckExecutionNetwork:
    async def test_same_network(self, network_config: NetworkConfig):
        client = _mock_execution_client(network_config.CHAIN_ID)
        with mock.patch('deposit_operator.common.startup_check.execution_client', client):
            await check_execution_network()

    async def test_other_network(self):
        client = _mock_execution_client(1)
        with mock.patch('deposit_operator.common.startup_check.execution_client', client):
            with pytest.raises(click.ClickException) as exc_info:
                await check_execution_network()

        assert exc_info.value.message == (
            'Execution node network is unknown (chain ID 1), while gnosis is set.'
        )
