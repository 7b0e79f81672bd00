# pylint: disable=unused-argument
from pathlib import Path

import click
from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address


def validate_eth_address(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> ChecksumAddress | None:
    if not value:
        return None
    try:
        if is_address(value):
            return to_checksum_address(value)
    except ValueError:
        pass

    raise click.BadParameter('Invalid Ethereum address')


def validate_execution_endpoints(ctx: click.Context, param: click.Parameter, value: str) -> str:
    endpoints = [endpoint.strip() for endpoint in (value or '').split(',') if endpoint.strip()]
    if not endpoints:
        raise click.BadParameter('At least one execution endpoint is required')

    for endpoint in endpoints:
        if not endpoint.startswith(('http://', 'https://', 'ws://', 'wss://')):
            raise click.BadParameter(f'Invalid execution endpoint: {endpoint}')

    return ','.join(endpoints)


def validate_deposit_data_file(ctx: click.Context, param: click.Parameter, value: str) -> Path:
    path = Path(value)
    if path.suffix.lower() != '.json':
        raise click.BadParameter('Deposit data file must be a JSON file')
    return path
