from eth_typing import HexStr
from eth_utils import remove_0x_prefix
from sw_utils.tests import faker
from web3.types import Gwei

from deposit_operator.config.networks import GNOSIS, NETWORKS
from deposit_operator.deposits.typings import DepositRecord

COMPOUNDING_CREDENTIALS_PREFIX = '02'


def create_withdrawal_credentials(
    address: str | None = None, prefix: str = COMPOUNDING_CREDENTIALS_PREFIX
) -> HexStr:
    address = address or faker.eth_address()
    return HexStr(prefix + '00' * 11 + remove_0x_prefix(HexStr(address)).lower())


def create_deposit_data_item(
    public_key: HexStr | None = None,
    withdrawal_credentials: HexStr | None = None,
    amount: Gwei | None = None,
    fork_version: HexStr | None = None,
) -> dict:
    """Deposit data record in the deposit CLI export format."""
    network_config = NETWORKS[GNOSIS]
    return {
        'pubkey': remove_0x_prefix(public_key or faker.validator_public_key()),
        'withdrawal_credentials': withdrawal_credentials or create_withdrawal_credentials(),
        'amount': network_config.DEPOSIT_AMOUNT_GWEI if amount is None else amount,
        'signature': faker.binary(length=96).hex(),
        'deposit_message_root': faker.binary(length=32).hex(),
        'deposit_data_root': faker.binary(length=32).hex(),
        'fork_version': fork_version or network_config.FORK_VERSION,
        'network_name': GNOSIS,
        'deposit_cli_version': '2.7.0',
    }


def create_deposit_data(count: int, **kwargs) -> list[dict]:
    return [create_deposit_data_item(**kwargs) for _ in range(count)]


def create_deposit_record(**kwargs) -> DepositRecord:
    return DepositRecord.from_json(create_deposit_data_item(**kwargs))


def create_deposit_records(count: int, **kwargs) -> list[DepositRecord]:
    return [create_deposit_record(**kwargs) for _ in range(count)]
