import asyncio
import logging
import sys
from pathlib import Path

import click
from eth_typing import ChecksumAddress

from deposit_operator.commands.common_options import (
    add_common_options,
    common_options,
    get_data_dir,
)
from deposit_operator.common.clients import close_clients, setup_clients
from deposit_operator.common.logging import setup_logging
from deposit_operator.common.metrics import metrics, metrics_server
from deposit_operator.common.startup_check import check_execution_network
from deposit_operator.common.utils import greenify, log_verbose
from deposit_operator.common.validators import validate_eth_address
from deposit_operator.config.settings import settings
from deposit_operator.deposits.exceptions import DepositDataError
from deposit_operator.deposits.execution import get_deposit_data_processor
from deposit_operator.deposits.parser import load_deposit_data
from deposit_operator.deposits.typings import ValidatedBatch

logger = logging.getLogger(__name__)

# Standard python exit codes:
# 0 - success
# 1 - error
DEPOSIT_DATA_ERROR = 2


@add_common_options(common_options)
@click.option(
    '--account',
    type=str,
    envvar='ACCOUNT',
    help='Address of the depositor. Enables the owner checks with --dappnode '
    'and the balance check otherwise.',
    callback=validate_eth_address,
)
@click.command(help='Validates deposit data file against the network and the deposits history.')
# pylint: disable-next=too-many-arguments
def check_deposit_data(
    network: str,
    data_dir: str,
    execution_endpoints: str,
    deposit_data_file: Path,
    cache_db: str | None,
    dappnode: bool,
    enable_metrics: bool,
    metrics_host: str,
    metrics_port: int,
    verbose: bool,
    log_level: str,
    log_format: str,
    account: ChecksumAddress | None,
) -> None:
    settings.set(
        network=network,
        data_dir=get_data_dir(data_dir),
        execution_endpoints=execution_endpoints,
        cache_db=cache_db,
        dappnode=dappnode,
        verbose=verbose,
        enable_metrics=enable_metrics,
        metrics_host=metrics_host,
        metrics_port=metrics_port,
        log_level=log_level,
        log_format=log_format,
    )
    setup_logging()
    try:
        batch = asyncio.run(main(deposit_data_file=deposit_data_file, account=account))
    except DepositDataError as e:
        log_verbose(e)
        sys.exit(DEPOSIT_DATA_ERROR)
    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        log_verbose(e)
        sys.exit(1)

    click.echo(
        f'Deposit data is valid. '
        f'New deposits: {greenify(len(batch))}, batch type: {greenify(batch.batch_type.value)}.'
    )
    if batch.has_duplicates:
        click.echo('Some validators in the file have already been deposited and will be skipped.')


async def main(deposit_data_file: Path, account: ChecksumAddress | None) -> ValidatedBatch:
    await setup_clients()
    try:
        await check_execution_network()
        if settings.enable_metrics:
            await metrics_server()
            metrics.set_app_version()

        deposits = load_deposit_data(deposit_data_file)
        processor = await get_deposit_data_processor(account=account)
        return await processor.validate_records(deposits)
    finally:
        await close_clients()
