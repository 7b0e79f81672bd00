import json
from pathlib import Path

import pytest

from deposit_operator.deposits.exceptions import (
    EmptyInputError,
    MalformedInputError,
    StructuralValidationError,
)
from deposit_operator.deposits.parser import load_deposit_data, parse_deposit_data
from deposit_operator.deposits.tests.factories import (
    create_deposit_data,
    create_deposit_data_item,
)


class TestParseDepositData:
    def test_basic(self):
        data = create_deposit_data(3)

        records = parse_deposit_data(json.dumps(data))

        assert len(records) == 3
        assert [r.pubkey for r in records] == [item['pubkey'] for item in data]
        assert records[0].public_key == '0x' + data[0]['pubkey']
        assert records[0].amount == 32_000_000_000

    def test_bytes_input(self):
        data = create_deposit_data(1)

        records = parse_deposit_data(json.dumps(data).encode())

        assert len(records) == 1

    def test_string_amount(self):
        item = create_deposit_data_item()
        item['amount'] = '32000000000'

        records = parse_deposit_data(json.dumps([item]))

        assert records[0].amount == 32_000_000_000

    @pytest.mark.parametrize('raw', ['not a json', '{"pubkey": "00"}', '"[]"', 'null', b'\x80abc'])
    def test_malformed(self, raw):
        with pytest.raises(MalformedInputError):
            parse_deposit_data(raw)

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            parse_deposit_data('[]')

    def test_not_object_record(self):
        data = create_deposit_data(1) + ['record']

        with pytest.raises(StructuralValidationError) as e:
            parse_deposit_data(json.dumps(data))

        assert e.value.index == 1
        assert e.value.field is None

    @pytest.mark.parametrize(
        'field',
        [
            'pubkey',
            'withdrawal_credentials',
            'amount',
            'signature',
            'deposit_message_root',
            'deposit_data_root',
            'fork_version',
        ],
    )
    def test_missing_field(self, field):
        item = create_deposit_data_item()
        del item[field]

        with pytest.raises(StructuralValidationError) as e:
            parse_deposit_data(json.dumps([item]))

        assert e.value.index == 0
        assert e.value.field == field

    @pytest.mark.parametrize('value', [None, '', 0, []])
    def test_falsy_amount(self, value):
        data = create_deposit_data(2)
        data[1]['amount'] = value

        with pytest.raises(StructuralValidationError) as e:
            parse_deposit_data(json.dumps(data))

        assert e.value.index == 1
        assert e.value.field == 'amount'

    @pytest.mark.parametrize(
        'value', ['32 GNO', 32.5, True, {'value': 32}, '²', '３２', '-32000000000']
    )
    def test_invalid_amount(self, value):
        item = create_deposit_data_item()
        item['amount'] = value

        with pytest.raises(StructuralValidationError) as e:
            parse_deposit_data(json.dumps([item]))

        assert e.value.field == 'amount'

    @pytest.mark.parametrize(
        'field,value',
        [
            ('pubkey', 'ab' * 47),
            ('pubkey', 'zz' * 48),
            ('signature', 'ab' * 95),
            ('withdrawal_credentials', 'ab' * 20),
            ('deposit_data_root', 12345),
            ('fork_version', '000000641'),
        ],
    )
    def test_invalid_hex_field(self, field, value):
        item = create_deposit_data_item()
        item[field] = value

        with pytest.raises(StructuralValidationError) as e:
            parse_deposit_data(json.dumps([item]))

        assert e.value.field == field

    def test_0x_prefixed_fields(self):
        item = create_deposit_data_item()
        item['pubkey'] = '0x' + item['pubkey']
        item['signature'] = '0x' + item['signature']

        records = parse_deposit_data(json.dumps([item]))

        assert records[0].public_key == item['pubkey']


def test_load_deposit_data(temp_dir: Path):
    data = create_deposit_data(2)
    path = temp_dir / 'deposit_data.json'
    path.write_text(json.dumps(data), encoding='utf-8')

    records = load_deposit_data(path)

    assert [r.deposit_data_root for r in records] == [item['deposit_data_root'] for item in data]


def test_deposit_record_views(owner_address: str):
    item = create_deposit_data_item(
        withdrawal_credentials='0x01' + '00' * 11 + owner_address[2:].upper()
    )

    record = parse_deposit_data(json.dumps([item]))[0]

    assert record.credentials_prefix == '01'
    assert record.withdrawal_address == owner_address.lower()
    assert record.public_key == '0x' + item['pubkey'].lower()
