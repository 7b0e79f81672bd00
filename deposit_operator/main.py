import click

import deposit_operator
from deposit_operator.commands.check_deposit_data import check_deposit_data
from deposit_operator.commands.submit_deposits import submit_deposits
from deposit_operator.common.utils import get_build_version

build = get_build_version()
version = deposit_operator.__version__
if build:
    version += f'-{build}'


@click.version_option(version=version, prog_name='Gnosis deposit operator')
@click.group()
def cli() -> None:
    pass


cli.add_command(check_deposit_data)
cli.add_command(submit_deposits)


if __name__ == '__main__':
    cli()
