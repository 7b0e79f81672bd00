import logging
from typing import Callable, Sequence, TypeVar

from eth_typing import HexStr
from eth_utils import remove_0x_prefix
from web3.types import Wei

from deposit_operator.config.networks import NetworkConfig
from deposit_operator.deposits.exceptions import (
    AllDuplicatesError,
    AmountMismatchError,
    BatchSizeExceededError,
    CountMismatchError,
    DepositDataError,
    DuplicateKeyError,
    InsufficientBalanceError,
    NetworkMismatchError,
    OwnershipMismatchError,
)
from deposit_operator.deposits.observers import PipelineObserver
from deposit_operator.deposits.typings import (
    LEGACY_CREDENTIALS_PREFIX,
    BatchType,
    DepositRecord,
    OwnerRegistration,
    ReconciledSet,
    ValidatedBatch,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


def get_batch_type(withdrawal_credentials: str) -> BatchType:
    """BLS (0x00) withdrawal credentials can't be deposited in batches."""
    if remove_0x_prefix(HexStr(withdrawal_credentials))[:2] == LEGACY_CREDENTIALS_PREFIX:
        return BatchType.LEGACY_SINGLE
    return BatchType.COMPOUNDING_BATCHABLE


class DepositConstraintsChecker:
    """
    Checks deposit data records against the network and the deposits history.
    Every check raises on the first failure.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        owner_registration: OwnerRegistration | None = None,
        available_balance: Wei | None = None,
        observer: PipelineObserver | None = None,
    ) -> None:
        self.network_config = network_config
        self.owner_registration = owner_registration
        self.available_balance = available_balance
        self.observer = observer or PipelineObserver()

    def validate(
        self, deposits: Sequence[DepositRecord], reconciled: ReconciledSet
    ) -> ValidatedBatch:
        self.check_records(deposits)
        return self.check_new_deposits(deposits, reconciled)

    def check_records(self, deposits: Sequence[DepositRecord]) -> None:
        """Checks that don't depend on the deposits history."""
        self._run_check('network', self._check_network, deposits)
        if self.owner_registration is not None:
            self._run_check('ownership', self._check_ownership, deposits, self.owner_registration)
            self._run_check('count', self._check_count, deposits, self.owner_registration)

    def check_new_deposits(
        self, deposits: Sequence[DepositRecord], reconciled: ReconciledSet
    ) -> ValidatedBatch:
        new_deposits = self._run_check('duplicates', self._filter_deposited, deposits, reconciled)
        batch_type = get_batch_type(new_deposits[0].credentials_prefix)

        if batch_type == BatchType.COMPOUNDING_BATCHABLE:
            self._run_check('batch_size', self._check_batch_size, new_deposits)
        self._run_check('amount', self._check_amounts, new_deposits)
        self._run_check('public_keys', self._check_unique_public_keys, new_deposits)
        if self.available_balance is not None:
            self._run_check('balance', self._check_balance, new_deposits, self.available_balance)

        return ValidatedBatch(
            deposits=tuple(new_deposits),
            has_duplicates=len(new_deposits) != len(deposits),
            batch_type=batch_type,
        )

    def _run_check(self, check: str, func: Callable[..., T], *args: object) -> T:
        try:
            result = func(*args)
        except DepositDataError as e:
            self.observer.check_failed(check, e)
            raise
        self.observer.check_passed(check)
        return result

    def _check_network(self, deposits: Sequence[DepositRecord]) -> None:
        fork_version = self.network_config.FORK_VERSION
        for deposit in deposits:
            if remove_0x_prefix(deposit.fork_version).lower() != fork_version:
                raise NetworkMismatchError(
                    fork_version=deposit.fork_version, chain_id=self.network_config.CHAIN_ID
                )

    @staticmethod
    def _check_ownership(
        deposits: Sequence[DepositRecord], owner_registration: OwnerRegistration
    ) -> None:
        owner_address = owner_registration.owner_address.lower()
        for deposit in deposits:
            if deposit.withdrawal_address != owner_address:
                raise OwnershipMismatchError(
                    public_key=deposit.public_key,
                    withdrawal_address=deposit.withdrawal_address,
                    owner_address=owner_registration.owner_address,
                )

    @staticmethod
    def _check_count(
        deposits: Sequence[DepositRecord], owner_registration: OwnerRegistration
    ) -> None:
        if len(deposits) != owner_registration.expected_deposit_count:
            raise CountMismatchError(
                expected=owner_registration.expected_deposit_count, actual=len(deposits)
            )

    @staticmethod
    def _filter_deposited(
        deposits: Sequence[DepositRecord], reconciled: ReconciledSet
    ) -> list[DepositRecord]:
        new_deposits = []
        for deposit in deposits:
            if deposit.public_key in reconciled:
                logger.debug('Skipping already deposited validator %s', deposit.public_key)
                continue
            new_deposits.append(deposit)

        if not new_deposits:
            raise AllDuplicatesError(count=len(deposits))
        return new_deposits

    def _check_batch_size(self, deposits: Sequence[DepositRecord]) -> None:
        max_batch_size = self.network_config.MAX_DEPOSITS_BATCH_SIZE
        if len(deposits) > max_batch_size:
            raise BatchSizeExceededError(count=len(deposits), max_batch_size=max_batch_size)

    def _check_amounts(self, deposits: Sequence[DepositRecord]) -> None:
        expected = self.network_config.DEPOSIT_AMOUNT_GWEI
        for deposit in deposits:
            if int(deposit.amount) != expected:
                raise AmountMismatchError(
                    public_key=deposit.public_key, amount=deposit.amount, expected=expected
                )

    @staticmethod
    def _check_unique_public_keys(deposits: Sequence[DepositRecord]) -> None:
        public_keys = set()
        for deposit in deposits:
            if deposit.public_key in public_keys:
                raise DuplicateKeyError(public_key=deposit.public_key)
            public_keys.add(deposit.public_key)

    def _check_balance(self, deposits: Sequence[DepositRecord], balance: Wei) -> None:
        required = Wei(self.network_config.TOKEN_DEPOSIT_AMOUNT * len(deposits))
        if balance < required:
            raise InsufficientBalanceError(
                required=required, balance=balance, symbol=self.network_config.TOKEN_SYMBOL
            )
