import json
from unittest import mock

import pytest
from eth_typing import BlockNumber
from sw_utils.tests import faker
from web3 import Web3
from web3.types import Wei

from deposit_operator.config.networks import NetworkConfig
from deposit_operator.deposits.exceptions import (
    AllDuplicatesError,
    HistoryFetchError,
    MalformedInputError,
    NetworkMismatchError,
)
from deposit_operator.deposits.pipeline import (
    DepositDataProcessor,
    get_available_balance,
    get_owner_registration,
)
from deposit_operator.deposits.tests.factories import (
    create_deposit_data,
    create_deposit_data_item,
    create_deposit_records,
    create_withdrawal_credentials,
)
from deposit_operator.deposits.typings import (
    BatchType,
    DepositFlow,
    DirectCallPayload,
    OwnerRegistration,
    ReconciledSet,
    SubmitFunction,
    TokenTransferPayload,
)


def _get_reconciler(public_keys: list[str] | None = None) -> mock.Mock:
    reconciler = mock.Mock()
    reconciler.reconcile = mock.AsyncMock(
        return_value=ReconciledSet().extend(public_keys or [], BlockNumber(5000))
    )
    return reconciler


class TestDepositDataProcessor:
    async def test_validate(self, network_config: NetworkConfig):
        data = create_deposit_data(3)
        reconciler = _get_reconciler(['0x' + data[0]['pubkey']])
        processor = DepositDataProcessor(network_config, reconciler)

        batch = await processor.validate(json.dumps(data))

        assert [d.pubkey for d in batch.deposits] == [data[1]['pubkey'], data[2]['pubkey']]
        assert batch.has_duplicates is True
        assert batch.batch_type == BatchType.COMPOUNDING_BATCHABLE
        reconciler.reconcile.assert_awaited_once()

    async def test_validate_idempotent(self, network_config: NetworkConfig):
        raw = json.dumps(create_deposit_data(5))
        processor = DepositDataProcessor(network_config, _get_reconciler())

        assert await processor.validate(raw) == await processor.validate(raw)

    async def test_validate_records(self, network_config: NetworkConfig):
        deposits = create_deposit_records(2)
        processor = DepositDataProcessor(network_config, _get_reconciler())

        batch = await processor.validate_records(deposits)

        assert batch.deposits == tuple(deposits)
        assert batch.has_duplicates is False

    async def test_malformed_input(self, network_config: NetworkConfig):
        reconciler = _get_reconciler()
        processor = DepositDataProcessor(network_config, reconciler)

        with pytest.raises(MalformedInputError):
            await processor.validate('{')

        reconciler.reconcile.assert_not_awaited()

    async def test_network_checked_before_history(self, network_config: NetworkConfig):
        reconciler = _get_reconciler()
        processor = DepositDataProcessor(network_config, reconciler)
        raw = json.dumps([create_deposit_data_item(fork_version='00000000')])

        with pytest.raises(NetworkMismatchError):
            await processor.validate(raw)

        reconciler.reconcile.assert_not_awaited()

    async def test_history_fetch_error(self, network_config: NetworkConfig):
        reconciler = mock.Mock()
        reconciler.reconcile = mock.AsyncMock(
            side_effect=HistoryFetchError(BlockNumber(1000), BlockNumber(1000))
        )
        processor = DepositDataProcessor(network_config, reconciler)

        with pytest.raises(HistoryFetchError):
            await processor.validate(json.dumps(create_deposit_data(1)))

    async def test_all_deposited(self, network_config: NetworkConfig):
        data = create_deposit_data(3)
        processor = DepositDataProcessor(
            network_config, _get_reconciler([item['pubkey'] for item in data])
        )

        with pytest.raises(AllDuplicatesError):
            await processor.validate(json.dumps(data))

    async def test_owner_checks(self, network_config: NetworkConfig, owner_address: str):
        credentials = create_withdrawal_credentials(owner_address)
        data = create_deposit_data(2, withdrawal_credentials=credentials)
        owner_registration = OwnerRegistration(
            owner_address=Web3.to_checksum_address(owner_address),
            status=1,
            expected_deposit_count=2,
            total_stake_amount=Wei(0),
        )
        processor = DepositDataProcessor(
            network_config, _get_reconciler(), owner_registration=owner_registration
        )

        batch = await processor.validate(json.dumps(data))

        assert len(batch) == 2

    async def test_dappnode_payloads(self, network_config: NetworkConfig):
        processor = DepositDataProcessor(network_config, _get_reconciler())
        batch = await processor.validate(json.dumps(create_deposit_data(3)))

        payloads = processor.get_payloads(batch, DepositFlow.DAPPNODE)

        assert len(payloads) == 1
        assert isinstance(payloads[0], DirectCallPayload)
        assert payloads[0].deposits_count == 3

    async def test_token_payloads(self, network_config: NetworkConfig):
        processor = DepositDataProcessor(network_config, _get_reconciler())
        batch = await processor.validate(json.dumps(create_deposit_data(3)))

        payloads = processor.get_payloads(batch, DepositFlow.TOKEN)

        assert len(payloads) == 1
        assert isinstance(payloads[0], TokenTransferPayload)
        assert payloads[0].function == SubmitFunction.TRANSFER_AND_CALL
        assert payloads[0].amount == network_config.TOKEN_DEPOSIT_AMOUNT * 3

    async def test_legacy_token_payloads(self, network_config: NetworkConfig):
        data = create_deposit_data(
            2, withdrawal_credentials=create_withdrawal_credentials(prefix='00')
        )
        processor = DepositDataProcessor(network_config, _get_reconciler())
        batch = await processor.validate(json.dumps(data))

        payloads = processor.get_payloads(batch, DepositFlow.TOKEN)

        assert [p.function for p in payloads] == [SubmitFunction.SINGLE_DEPOSIT] * 2


async def test_get_owner_registration(owner_address: str):
    account = faker.eth_address()
    owner_registration = OwnerRegistration(
        owner_address=Web3.to_checksum_address(owner_address),
        status=1,
        expected_deposit_count=4,
        total_stake_amount=Wei(0),
    )
    incentive_contract = mock.Mock()
    incentive_contract.get_user = mock.AsyncMock(return_value=owner_registration)

    assert await get_owner_registration(incentive_contract, account) == owner_registration
    incentive_contract.get_user.assert_awaited_once_with(account)


async def test_get_available_balance():
    account = faker.eth_address()
    token_contract = mock.Mock()
    token_contract.get_balance = mock.AsyncMock(return_value=Web3.to_wei(5, 'ether'))

    assert await get_available_balance(token_contract, account) == Web3.to_wei(5, 'ether')


def test_owner_registration_from_contract(owner_address: str):
    owner_registration = OwnerRegistration.from_contract(
        (owner_address.lower(), 1, 3, Web3.to_wei(3, 'ether'))
    )

    assert owner_registration.owner_address == Web3.to_checksum_address(owner_address)
    assert owner_registration.expected_deposit_count == 3
    assert owner_registration.total_stake_amount == Web3.to_wei(3, 'ether')
