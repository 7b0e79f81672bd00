import logging

import click
from eth_typing import ChecksumAddress
from web3 import Web3

from deposit_operator.common.clients import execution_client, execution_non_retry_client
from deposit_operator.common.contracts import (
    DappnodeIncentiveContract,
    DepositContract,
    GnoTokenContract,
)
from deposit_operator.config.settings import settings
from deposit_operator.deposits.cache import (
    BaseDepositsCache,
    DepositsCacheCrud,
    EmptyDepositsCache,
)
from deposit_operator.deposits.observers import (
    LoggingObserver,
    MetricsObserver,
    PipelineObserver,
)
from deposit_operator.deposits.pipeline import (
    DepositDataProcessor,
    get_available_balance,
    get_owner_registration,
)
from deposit_operator.deposits.reconciler import DepositHistoryReconciler
from deposit_operator.deposits.submission import DepositSubmitter

logger = logging.getLogger(__name__)


def get_deposit_contract() -> DepositContract:
    return DepositContract(
        address=settings.network_config.DEPOSIT_CONTRACT_ADDRESS,
        execution_client=execution_non_retry_client,
    )


def get_token_contract() -> GnoTokenContract:
    return GnoTokenContract(
        address=settings.network_config.TOKEN_CONTRACT_ADDRESS,
        execution_client=execution_client,
    )


def get_incentive_contract() -> DappnodeIncentiveContract:
    if not settings.is_dappnode_incentive_set:
        raise click.ClickException(
            'DAppNode incentive contract address is not set. '
            'Please provide DAPPNODE_INCENTIVE_CONTRACT_ADDRESS environment variable.'
        )
    return DappnodeIncentiveContract(
        address=settings.dappnode_incentive_address,
        execution_client=execution_client,
    )


def get_observer() -> PipelineObserver:
    if settings.enable_metrics:
        return MetricsObserver(network=settings.network)
    return LoggingObserver()


def get_deposits_cache() -> BaseDepositsCache:
    if settings.cache_db.is_file():
        return DepositsCacheCrud(settings.cache_db)
    logger.info(
        'Deposits cache %s not found, fetching the whole deposits history', settings.cache_db
    )
    return EmptyDepositsCache()


async def get_deposit_data_processor(
    account: ChecksumAddress | None = None,
) -> DepositDataProcessor:
    """
    Builds the processor for the configured network.
    Owner checks are enabled for the DAppNode flow, balance check for the token flow.
    Both require the account.
    """
    network_config = settings.network_config
    observer = get_observer()
    reconciler = DepositHistoryReconciler(
        network_config=network_config,
        deposits_cache=get_deposits_cache(),
        deposit_contract=get_deposit_contract(),
        blocks_range=settings.events_blocks_range_interval,
        observer=observer,
    )

    owner_registration = None
    available_balance = None
    if account and settings.dappnode:
        owner_registration = await get_owner_registration(get_incentive_contract(), account)
    elif account:
        available_balance = await get_available_balance(get_token_contract(), account)
        logger.info(
            'Account %s balance: %s %s',
            account,
            Web3.from_wei(available_balance, 'ether'),
            network_config.TOKEN_SYMBOL,
        )

    return DepositDataProcessor(
        network_config=network_config,
        reconciler=reconciler,
        owner_registration=owner_registration,
        available_balance=available_balance,
        observer=observer,
    )


def get_deposit_submitter() -> DepositSubmitter:
    if settings.dappnode:
        return DepositSubmitter(
            network_config=settings.network_config,
            incentive_contract=get_incentive_contract(),
        )
    return DepositSubmitter(
        network_config=settings.network_config,
        token_contract=get_token_contract(),
    )
