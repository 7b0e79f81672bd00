from eth_typing import HexStr
from web3 import Web3
from web3.types import Wei

from deposit_operator.deposits.exceptions import InternalAssemblyError
from deposit_operator.deposits.typings import (
    DepositRecord,
    DirectCallPayload,
    SubmitFunction,
    TokenTransferPayload,
    ValidatedBatch,
)

PUBLIC_KEY_LENGTH = 48
SIGNATURE_LENGTH = 96
DEPOSIT_DATA_ROOT_LENGTH = 32
WITHDRAWAL_CREDENTIALS_LENGTH = 32


def get_direct_call_payload(batch: ValidatedBatch) -> DirectCallPayload:
    """
    Encodes deposits for the incentive contract `submitPendingDeposits` call:
    concatenated public keys, concatenated signatures and the list of deposit data roots.
    """
    pubkeys = b''
    signatures = b''
    deposit_data_roots = []
    for deposit in batch.deposits:
        pubkeys += _to_bytes(deposit.pubkey, PUBLIC_KEY_LENGTH)
        signatures += _to_bytes(deposit.signature, SIGNATURE_LENGTH)
        deposit_data_roots.append(_to_bytes(deposit.deposit_data_root, DEPOSIT_DATA_ROOT_LENGTH))

    return DirectCallPayload(
        pubkeys=pubkeys,
        signatures=signatures,
        deposit_data_roots=tuple(deposit_data_roots),
    )


def get_token_transfer_payloads(
    batch: ValidatedBatch, amount_per_deposit: Wei
) -> list[TokenTransferPayload]:
    """
    Encodes deposits as the `transferAndCall` data of the deposit token.
    Batchable deposits share the withdrawal credentials of the first deposit:
    `withdrawal_credentials || (pubkey || signature || deposit_data_root)*`.
    Otherwise every deposit is sent in a separate call.
    """
    if batch.is_batchable:
        data = _to_bytes(batch.deposits[0].withdrawal_credentials, WITHDRAWAL_CREDENTIALS_LENGTH)
        for deposit in batch.deposits:
            data += _encode_deposit(deposit)

        return [
            TokenTransferPayload(
                data=data,
                amount=Wei(amount_per_deposit * len(batch)),
                deposits_count=len(batch),
                function=SubmitFunction.TRANSFER_AND_CALL,
            )
        ]

    return [
        TokenTransferPayload(
            data=_to_bytes(deposit.withdrawal_credentials, WITHDRAWAL_CREDENTIALS_LENGTH)
            + _encode_deposit(deposit),
            amount=amount_per_deposit,
            deposits_count=1,
            function=SubmitFunction.SINGLE_DEPOSIT,
        )
        for deposit in batch.deposits
    ]


def _encode_deposit(deposit: DepositRecord) -> bytes:
    return (
        _to_bytes(deposit.pubkey, PUBLIC_KEY_LENGTH)
        + _to_bytes(deposit.signature, SIGNATURE_LENGTH)
        + _to_bytes(deposit.deposit_data_root, DEPOSIT_DATA_ROOT_LENGTH)
    )


def _to_bytes(value: str, length: int) -> bytes:
    """Decodes hex with or without the `0x` prefix, the width must match exactly."""
    try:
        data = Web3.to_bytes(hexstr=HexStr(value))
    except (TypeError, ValueError) as e:
        raise InternalAssemblyError(f'Invalid hex value: {value!r}') from e

    if len(data) != length:
        raise InternalAssemblyError(
            f'Invalid value length: expected {length} bytes, got {len(data)} for {value!r}'
        )
    return data
