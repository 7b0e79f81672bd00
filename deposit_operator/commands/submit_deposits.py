import asyncio
import logging
import sys
from pathlib import Path

import click

from deposit_operator.commands.check_deposit_data import DEPOSIT_DATA_ERROR
from deposit_operator.commands.common_options import (
    add_common_options,
    common_options,
    get_data_dir,
)
from deposit_operator.common.clients import close_clients, setup_clients
from deposit_operator.common.logging import setup_logging
from deposit_operator.common.metrics import metrics, metrics_server
from deposit_operator.common.startup_check import check_execution_network
from deposit_operator.common.utils import format_error, greenify, log_verbose, redify
from deposit_operator.common.wallet import wallet
from deposit_operator.config.settings import settings
from deposit_operator.deposits.exceptions import DepositDataError
from deposit_operator.deposits.execution import (
    get_deposit_data_processor,
    get_deposit_submitter,
)
from deposit_operator.deposits.parser import load_deposit_data
from deposit_operator.deposits.typings import DepositFlow, SubmissionResult

logger = logging.getLogger(__name__)


@add_common_options(common_options)
@click.option(
    '--wallet-file',
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    envvar='WALLET_FILE',
    help='Absolute path to the wallet. Default is wallet/wallet.json in data dir.',
)
@click.option(
    '--wallet-password-file',
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    envvar='WALLET_PASSWORD_FILE',
    help='Absolute path to the wallet password file. Default is wallet/password.txt in data dir.',
)
@click.option(
    '--no-confirm',
    is_flag=True,
    default=False,
    help='Skips confirmation messages when provided.',
)
@click.command(help='Validates deposit data file and submits the deposits.')
# pylint: disable-next=too-many-arguments,too-many-locals
def submit_deposits(
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
    wallet_file: str | None,
    wallet_password_file: str | None,
    no_confirm: bool,
) -> None:
    settings.set(
        network=network,
        data_dir=get_data_dir(data_dir),
        execution_endpoints=execution_endpoints,
        cache_db=cache_db,
        dappnode=dappnode,
        wallet_file=wallet_file,
        wallet_password_file=wallet_password_file,
        verbose=verbose,
        enable_metrics=enable_metrics,
        metrics_host=metrics_host,
        metrics_port=metrics_port,
        log_level=log_level,
        log_format=log_format,
    )
    setup_logging()
    try:
        results = asyncio.run(main(deposit_data_file=deposit_data_file, no_confirm=no_confirm))
    except DepositDataError as e:
        log_verbose(e)
        sys.exit(DEPOSIT_DATA_ERROR)
    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        log_verbose(e)
        sys.exit(1)

    for result in results:
        if result.is_successful:
            click.echo(
                f'Submitted {result.payload.deposits_count} deposit(s). '
                f'Transaction hash: {greenify(result.tx_hash)}'
            )
        else:
            click.echo(
                f'Failed to submit {result.payload.deposits_count} deposit(s): '
                f'{redify(format_error(result.error))}'
            )

    if not all(result.is_successful for result in results):
        sys.exit(1)


async def main(deposit_data_file: Path, no_confirm: bool) -> list[SubmissionResult]:
    if not wallet.can_load():
        raise click.ClickException(
            'Wallet is not available. Please provide --wallet-file and --wallet-password-file '
            'or WALLET_PRIVATE_KEY environment variable.'
        )

    await setup_clients()
    try:
        await check_execution_network()
        if settings.enable_metrics:
            await metrics_server()
            metrics.set_app_version()

        deposits = load_deposit_data(deposit_data_file)
        processor = await get_deposit_data_processor(account=wallet.address)
        batch = await processor.validate_records(deposits)

        flow = DepositFlow.DAPPNODE if settings.dappnode else DepositFlow.TOKEN
        payloads = processor.get_payloads(batch, flow)

        if not no_confirm:
            click.confirm(
                f'Submit {len(batch)} deposit(s) in {len(payloads)} transaction(s) '
                f'from {wallet.address}?',
                abort=True,
            )

        return await get_deposit_submitter().submit(payloads)
    finally:
        await close_clients()
