from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from eth_typing import BlockNumber, ChecksumAddress, HexStr
from eth_utils import add_0x_prefix, remove_0x_prefix
from web3 import Web3
from web3.types import Gwei, Wei

# the first byte of the withdrawal credentials is the credentials type,
# the following 11 bytes are zero padding before the withdrawal address
WITHDRAWAL_CREDENTIALS_PREFIX_LENGTH = 24
LEGACY_CREDENTIALS_PREFIX = '00'


def normalize_public_key(public_key: str) -> HexStr:
    return HexStr(add_0x_prefix(HexStr(public_key)).lower())


class BatchType(Enum):
    """
    LEGACY_SINGLE: BLS withdrawal credentials, every deposit is submitted separately.
    COMPOUNDING_BATCHABLE: deposits can be aggregated into one call.
    """

    LEGACY_SINGLE = 'LEGACY_SINGLE'
    COMPOUNDING_BATCHABLE = 'COMPOUNDING_BATCHABLE'


class SubmitFunction(Enum):
    SINGLE_DEPOSIT = 'single-deposit'
    SUBMIT_BATCH = 'submit-batch'
    TRANSFER_AND_CALL = 'transfer-and-call'


class DepositFlow(Enum):
    """
    DAPPNODE: deposits are submitted to the DAppNode incentive contract.
    TOKEN: deposits are funded with GNO `transferAndCall` to the deposit contract.
    """

    DAPPNODE = 'DAPPNODE'
    TOKEN = 'TOKEN'


@dataclass(frozen=True)
# pylint: disable-next=too-many-instance-attributes
class DepositRecord:
    pubkey: HexStr
    withdrawal_credentials: HexStr
    amount: Gwei
    signature: HexStr
    deposit_message_root: HexStr
    deposit_data_root: HexStr
    fork_version: HexStr

    @property
    def public_key(self) -> HexStr:
        return normalize_public_key(self.pubkey)

    @property
    def credentials_prefix(self) -> str:
        return remove_0x_prefix(self.withdrawal_credentials)[:2].lower()

    @property
    def withdrawal_address(self) -> HexStr:
        credentials = remove_0x_prefix(self.withdrawal_credentials)
        return HexStr('0x' + credentials[WITHDRAWAL_CREDENTIALS_PREFIX_LENGTH:].lower())

    @staticmethod
    def from_json(data: dict) -> 'DepositRecord':
        return DepositRecord(
            pubkey=data['pubkey'],
            withdrawal_credentials=data['withdrawal_credentials'],
            amount=Gwei(int(data['amount'])),
            signature=data['signature'],
            deposit_message_root=data['deposit_message_root'],
            deposit_data_root=data['deposit_data_root'],
            fork_version=data['fork_version'],
        )


@dataclass(frozen=True)
class CachedDeposits:
    public_keys: list[HexStr]
    last_block: BlockNumber


@dataclass(frozen=True)
class ReconciledSet:
    public_keys: frozenset[HexStr] = field(default_factory=frozenset)
    last_block: BlockNumber = BlockNumber(0)

    def __contains__(self, public_key: object) -> bool:
        if not isinstance(public_key, str):
            return False
        return normalize_public_key(public_key) in self.public_keys

    def __len__(self) -> int:
        return len(self.public_keys)

    def extend(self, public_keys: Iterable[str], last_block: BlockNumber) -> 'ReconciledSet':
        """Returns a new set with the public keys added. Never removes keys."""
        return ReconciledSet(
            public_keys=self.public_keys.union(normalize_public_key(pk) for pk in public_keys),
            last_block=BlockNumber(max(self.last_block, last_block)),
        )


@dataclass(frozen=True)
class ValidatedBatch:
    deposits: tuple[DepositRecord, ...]
    has_duplicates: bool
    batch_type: BatchType

    @property
    def is_batchable(self) -> bool:
        return self.batch_type == BatchType.COMPOUNDING_BATCHABLE

    def __len__(self) -> int:
        return len(self.deposits)


@dataclass(frozen=True)
class OwnerRegistration:
    owner_address: ChecksumAddress
    status: int
    expected_deposit_count: int
    total_stake_amount: Wei

    @staticmethod
    def from_contract(data: tuple) -> 'OwnerRegistration':
        safe, status, expected_deposit_count, total_stake_amount = data
        return OwnerRegistration(
            owner_address=Web3.to_checksum_address(safe),
            status=int(status),
            expected_deposit_count=int(expected_deposit_count),
            total_stake_amount=Wei(int(total_stake_amount)),
        )


@dataclass(frozen=True)
class DirectCallPayload:
    pubkeys: bytes
    signatures: bytes
    deposit_data_roots: tuple[bytes, ...]
    function: SubmitFunction = SubmitFunction.SUBMIT_BATCH

    @property
    def deposits_count(self) -> int:
        return len(self.deposit_data_roots)


@dataclass(frozen=True)
class TokenTransferPayload:
    data: bytes
    amount: Wei
    deposits_count: int
    function: SubmitFunction = SubmitFunction.TRANSFER_AND_CALL


SubmissionPayload = Union[DirectCallPayload, TokenTransferPayload]


@dataclass(frozen=True)
class SubmissionResult:
    payload: SubmissionPayload
    tx_hash: HexStr | None = None
    error: Exception | None = None

    @property
    def is_successful(self) -> bool:
        return self.error is None
