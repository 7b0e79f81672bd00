import logging

from eth_typing import ChecksumAddress
from web3.types import Wei

from deposit_operator.common.contracts import DappnodeIncentiveContract, GnoTokenContract
from deposit_operator.config.networks import NetworkConfig
from deposit_operator.deposits.constraints import DepositConstraintsChecker
from deposit_operator.deposits.observers import PipelineObserver
from deposit_operator.deposits.parser import parse_deposit_data
from deposit_operator.deposits.payload import (
    get_direct_call_payload,
    get_token_transfer_payloads,
)
from deposit_operator.deposits.reconciler import DepositHistoryReconciler
from deposit_operator.deposits.typings import (
    DepositFlow,
    DepositRecord,
    OwnerRegistration,
    SubmissionPayload,
    ValidatedBatch,
)

logger = logging.getLogger(__name__)


class DepositDataProcessor:
    """
    Turns the raw deposit data into the validated batch:
    parsing, network and owner checks, deposits history reconciliation,
    deduplication and protocol constraints.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        reconciler: DepositHistoryReconciler,
        owner_registration: OwnerRegistration | None = None,
        available_balance: Wei | None = None,
        observer: PipelineObserver | None = None,
    ) -> None:
        self.network_config = network_config
        self.reconciler = reconciler
        self.checker = DepositConstraintsChecker(
            network_config=network_config,
            owner_registration=owner_registration,
            available_balance=available_balance,
            observer=observer,
        )

    async def validate(self, raw: str | bytes) -> ValidatedBatch:
        return await self.validate_records(parse_deposit_data(raw))

    async def validate_records(self, deposits: list[DepositRecord]) -> ValidatedBatch:
        # cheap checks go before fetching the deposits history
        self.checker.check_records(deposits)

        reconciled = await self.reconciler.reconcile()
        batch = self.checker.check_new_deposits(deposits, reconciled)
        logger.info(
            'Validated %d new deposit(s), %d already deposited, batch type: %s',
            len(batch),
            len(deposits) - len(batch),
            batch.batch_type.value,
        )
        return batch

    def get_payloads(self, batch: ValidatedBatch, flow: DepositFlow) -> list[SubmissionPayload]:
        if flow == DepositFlow.DAPPNODE:
            return [get_direct_call_payload(batch)]
        return list(
            get_token_transfer_payloads(batch, self.network_config.TOKEN_DEPOSIT_AMOUNT)
        )


async def get_owner_registration(
    incentive_contract: DappnodeIncentiveContract, account: ChecksumAddress
) -> OwnerRegistration:
    owner_registration = await incentive_contract.get_user(account)
    logger.info(
        'Account %s expects %d deposit(s) to %s',
        account,
        owner_registration.expected_deposit_count,
        owner_registration.owner_address,
    )
    return owner_registration


async def get_available_balance(
    token_contract: GnoTokenContract, account: ChecksumAddress
) -> Wei:
    return await token_contract.get_balance(account)
