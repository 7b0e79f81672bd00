from eth_typing import BlockNumber, HexStr
from web3 import Web3
from web3.types import Gwei, Wei

MALFORMED_INPUT = (
    'Oops, something went wrong while parsing your json file. '
    'Please check the file and try again.'
)
INVALID_FILE = 'This is not a valid file. Please try again.'
ALL_DUPLICATES = 'Deposits have already been made to all validators in this file.'
DUPLICATED_PUBLIC_KEYS = 'Duplicated public keys.'


class DepositDataError(ValueError):
    """Deposit data can't be submitted."""


class MalformedInputError(DepositDataError):
    def __init__(self) -> None:
        super().__init__(MALFORMED_INPUT)


class EmptyInputError(DepositDataError):
    def __init__(self) -> None:
        super().__init__(INVALID_FILE)


class StructuralValidationError(DepositDataError):
    def __init__(self, index: int, field: str | None = None):
        super().__init__(INVALID_FILE)
        self.index = index
        self.field = field


class NetworkMismatchError(DepositDataError):
    def __init__(self, fork_version: str, chain_id: int):
        super().__init__(
            f"This JSON file isn't for the right network ({fork_version}). "
            f'Upload a file generated for your current network: {chain_id}'
        )
        self.fork_version = fork_version
        self.chain_id = chain_id


class OwnershipMismatchError(DepositDataError):
    def __init__(self, public_key: HexStr, withdrawal_address: HexStr, owner_address: str):
        super().__init__(
            'At least one of the provided keys does not match '
            'your safe address as withdrawal credentials.'
        )
        self.public_key = public_key
        self.withdrawal_address = withdrawal_address
        self.owner_address = owner_address


class CountMismatchError(DepositDataError):
    def __init__(self, expected: int, actual: int):
        super().__init__(
            f'Wrong number of keys. Expected claiming ({expected}) validator deposits '
            f'to your safe, got {actual}.'
        )
        self.expected = expected
        self.actual = actual


class AllDuplicatesError(DepositDataError):
    def __init__(self, count: int):
        super().__init__(ALL_DUPLICATES)
        self.count = count


class BatchSizeExceededError(DepositDataError):
    def __init__(self, count: int, max_batch_size: int):
        super().__init__(
            f'Number of validators exceeds the maximum batch size of {max_batch_size}. '
            f'Please upload a file with {max_batch_size} or fewer validators.'
        )
        self.count = count
        self.max_batch_size = max_batch_size


class AmountMismatchError(DepositDataError):
    def __init__(self, public_key: HexStr, amount: Gwei, expected: Gwei):
        super().__init__(
            f'Amount should be exactly {expected} Gwei for deposits, '
            f'got {amount} Gwei for {public_key}.'
        )
        self.public_key = public_key
        self.amount = amount
        self.expected = expected


class DuplicateKeyError(DepositDataError):
    def __init__(self, public_key: HexStr):
        super().__init__(DUPLICATED_PUBLIC_KEYS)
        self.public_key = public_key


class InsufficientBalanceError(DepositDataError):
    def __init__(self, required: Wei, balance: Wei, symbol: str):
        self.required = required
        self.balance = balance
        self.symbol = symbol
        super().__init__(
            f'Insufficient balance. {Web3.from_wei(required, "ether")} {symbol} is required, '
            f'{Web3.from_wei(self.shortfall, "ether")} {symbol} is missing.'
        )

    @property
    def shortfall(self) -> Wei:
        return Wei(max(self.required - self.balance, 0))


class HistoryFetchError(RuntimeError):
    def __init__(self, from_block: BlockNumber, to_block: BlockNumber):
        super().__init__(
            f'Failed to fetch existing deposits for blocks {from_block} - {to_block}. '
            'Please try again'
        )
        self.from_block = from_block
        self.to_block = to_block


class InternalAssemblyError(RuntimeError):
    pass


class SubmissionError(RuntimeError):
    pass
