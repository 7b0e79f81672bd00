import logging
from typing import Sequence

from web3 import Web3

from deposit_operator.common.contracts import DappnodeIncentiveContract, GnoTokenContract
from deposit_operator.common.utils import format_error
from deposit_operator.config.networks import NetworkConfig
from deposit_operator.deposits.exceptions import SubmissionError
from deposit_operator.deposits.typings import (
    DirectCallPayload,
    SubmissionPayload,
    SubmissionResult,
    TokenTransferPayload,
)

logger = logging.getLogger(__name__)


class DepositSubmitter:
    """
    Sends deposit payloads one by one from the same account,
    every transaction takes the next pending nonce.
    Payloads are independent: a failed transaction doesn't stop the others.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        token_contract: GnoTokenContract | None = None,
        incentive_contract: DappnodeIncentiveContract | None = None,
    ) -> None:
        self.network_config = network_config
        self.token_contract = token_contract
        self.incentive_contract = incentive_contract

    async def submit(self, payloads: Sequence[SubmissionPayload]) -> list[SubmissionResult]:
        """Returns submission results in the payloads order."""
        logger.info('Submitting %d deposit transaction(s)', len(payloads))
        results = []
        for payload in payloads:
            results.append(await self._submit_payload(payload))
        return results

    async def _submit_payload(self, payload: SubmissionPayload) -> SubmissionResult:
        try:
            tx = await self._send(payload)
        except Exception as e:
            logger.error(
                'Failed to submit %s transaction for %d deposit(s): %s',
                payload.function.value,
                payload.deposits_count,
                format_error(e),
            )
            return SubmissionResult(payload=payload, error=_to_submission_error(e))

        tx_hash = Web3.to_hex(tx)
        logger.info(
            'Deposit transaction %s sent for %d deposit(s)', tx_hash, payload.deposits_count
        )
        return SubmissionResult(payload=payload, tx_hash=tx_hash)

    async def _send(self, payload: SubmissionPayload) -> bytes:
        if isinstance(payload, DirectCallPayload):
            if self.incentive_contract is None:
                raise SubmissionError('DAppNode incentive contract is not configured')
            return await self.incentive_contract.submit_pending_deposits(payload)

        if isinstance(payload, TokenTransferPayload):
            if self.token_contract is None:
                raise SubmissionError('Deposit token contract is not configured')
            return await self.token_contract.transfer_and_call(
                to=self.network_config.DEPOSIT_CONTRACT_ADDRESS,
                amount=payload.amount,
                data=payload.data,
            )

        raise SubmissionError(f'Unsupported payload type {type(payload).__name__}')


def _to_submission_error(e: Exception) -> SubmissionError:
    if isinstance(e, SubmissionError):
        return e
    error = SubmissionError(format_error(e))
    error.__cause__ = e
    return error
