import json
import logging
from pathlib import Path

from eth_utils import is_hexstr, remove_0x_prefix

from deposit_operator.deposits.exceptions import (
    EmptyInputError,
    MalformedInputError,
    StructuralValidationError,
)
from deposit_operator.deposits.typings import DepositRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    'pubkey',
    'withdrawal_credentials',
    'amount',
    'signature',
    'deposit_message_root',
    'deposit_data_root',
    'fork_version',
)

# field name to the length in bytes
HEX_FIELDS = {
    'pubkey': 48,
    'withdrawal_credentials': 32,
    'signature': 96,
    'deposit_message_root': 32,
    'deposit_data_root': 32,
    'fork_version': 4,
}


def load_deposit_data(path: str | Path) -> list[DepositRecord]:
    with open(path, 'r', encoding='utf-8') as f:
        return parse_deposit_data(f.read())


def parse_deposit_data(raw: str | bytes) -> list[DepositRecord]:
    """
    Parses the deposit data exported by the deposit CLI.
    Records are returned in the file order.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError() from e

    if not isinstance(data, list):
        raise MalformedInputError()

    if not data:
        raise EmptyInputError()

    records = [_parse_record(index, item) for index, item in enumerate(data)]
    logger.debug('Parsed %d deposit data records', len(records))
    return records


def _parse_record(index: int, item: object) -> DepositRecord:
    if not isinstance(item, dict):
        raise StructuralValidationError(index=index)

    # zero amount is invalid the same way as the missing one
    for field in REQUIRED_FIELDS:
        if not item.get(field):
            raise StructuralValidationError(index=index, field=field)

    for field, length in HEX_FIELDS.items():
        if not _is_hex_of_length(item[field], length):
            raise StructuralValidationError(index=index, field=field)

    if not _is_integer(item['amount']):
        raise StructuralValidationError(index=index, field='amount')

    return DepositRecord.from_json(item)


def _is_hex_of_length(value: object, length: int) -> bool:
    if not isinstance(value, str) or not is_hexstr(value):
        return False
    return len(remove_0x_prefix(value)) == length * 2


def _is_integer(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    # str.isdigit() accepts digits int() can't parse, e.g. superscripts
    return isinstance(value, str) and value.isascii() and value.isdecimal()
