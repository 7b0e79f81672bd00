from pathlib import Path
from typing import Callable

import click
from click.decorators import FC

from deposit_operator.common.logging import LOG_LEVELS
from deposit_operator.common.validators import (
    validate_deposit_data_file,
    validate_execution_endpoints,
)
from deposit_operator.config.networks import AVAILABLE_NETWORKS, GNOSIS
from deposit_operator.config.settings import (
    DATA_DIR,
    DEFAULT_METRICS_HOST,
    DEFAULT_METRICS_PORT,
    LOG_FORMATS,
    LOG_PLAIN,
)

common_options = [
    click.option(
        '--network',
        type=click.Choice(
            AVAILABLE_NETWORKS,
            case_sensitive=False,
        ),
        default=GNOSIS,
        envvar='NETWORK',
        help=f'The network of the deposit contract. Default is {GNOSIS}.',
    ),
    click.option(
        '--data-dir',
        default=str(DATA_DIR),
        envvar='DATA_DIR',
        help=f'Path where the wallet and the deposits cache are placed. Default is {DATA_DIR}.',
        type=click.Path(exists=False, file_okay=False, dir_okay=True),
    ),
    click.option(
        '--execution-endpoints',
        type=str,
        envvar='EXECUTION_ENDPOINTS',
        prompt='Enter the comma separated list of API endpoints for execution nodes',
        help='Comma separated list of API endpoints for execution nodes.',
        callback=validate_execution_endpoints,
    ),
    click.option(
        '--deposit-data-file',
        type=click.Path(exists=True, file_okay=True, dir_okay=False),
        envvar='DEPOSIT_DATA_FILE',
        required=True,
        help='Path to the deposit data JSON file generated by the deposit CLI.',
        callback=validate_deposit_data_file,
    ),
    click.option(
        '--cache-db',
        type=click.Path(exists=False, file_okay=True, dir_okay=False),
        envvar='CACHE_DB',
        help='Path to the deposits cache database. Default is deposits_cache.db in data dir.',
    ),
    click.option(
        '--dappnode',
        is_flag=True,
        envvar='DAPPNODE',
        help='Submit deposits to the DAppNode incentive contract. '
        'Default is the GNO token transfer to the deposit contract.',
    ),
    click.option(
        '--enable-metrics',
        is_flag=True,
        envvar='ENABLE_METRICS',
        help='Whether to enable metrics server. Disabled by default.',
    ),
    click.option(
        '--metrics-host',
        type=str,
        help=f'The prometheus metrics host. Default is {DEFAULT_METRICS_HOST}.',
        envvar='METRICS_HOST',
        default=DEFAULT_METRICS_HOST,
    ),
    click.option(
        '--metrics-port',
        type=int,
        help=f'The prometheus metrics port. Default is {DEFAULT_METRICS_PORT}.',
        envvar='METRICS_PORT',
        default=DEFAULT_METRICS_PORT,
    ),
    click.option(
        '-v',
        '--verbose',
        help='Enable debug mode. Default is false.',
        envvar='VERBOSE',
        is_flag=True,
    ),
    click.option(
        '--log-level',
        type=click.Choice(
            LOG_LEVELS,
            case_sensitive=False,
        ),
        default='INFO',
        envvar='LOG_LEVEL',
        help='The log level.',
    ),
    click.option(
        '--log-format',
        type=click.Choice(
            LOG_FORMATS,
            case_sensitive=False,
        ),
        default=LOG_PLAIN,
        envvar='LOG_FORMAT',
        help='The log record format. Can be "plain" or "json".',
    ),
]


def add_common_options(options: list[Callable[[FC], FC]]) -> Callable[[FC], FC]:
    def _add_options(func: FC) -> FC:
        for option in reversed(options):
            func = option(func)
        return func

    return _add_options


def get_data_dir(data_dir: str) -> Path:
    path = Path(data_dir).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path
