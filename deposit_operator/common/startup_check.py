import logging

import click

from deposit_operator.common.clients import execution_client
from deposit_operator.config.networks import NETWORKS
from deposit_operator.config.settings import settings

logger = logging.getLogger(__name__)


async def check_execution_network() -> None:
    """
    Checks that execution node network is the same as settings.network
    """
    execution_chain_id = await execution_client.eth.chain_id
    if execution_chain_id == settings.network_config.CHAIN_ID:
        logger.info('Execution node is connected to %s', settings.network)
        return

    chain_id_to_network = {
        network_config.CHAIN_ID: network for network, network_config in NETWORKS.items()
    }
    execution_network = chain_id_to_network.get(execution_chain_id)
    raise click.ClickException(
        f'Execution node network is {execution_network or "unknown"} '
        f'(chain ID {execution_chain_id}), while {settings.network} is set.'
    )
