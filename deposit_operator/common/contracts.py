import json
import os
from functools import cached_property

from eth_typing import BlockNumber, ChecksumAddress
from hexbytes import HexBytes
from web3.contract import AsyncContract
from web3.contract.async_contract import AsyncContractEvents, AsyncContractFunctions
from web3.types import EventData, Wei

from deposit_operator.common.clients import ExecutionClient
from deposit_operator.deposits.typings import DirectCallPayload, OwnerRegistration


class ContractWrapper:
    abi_path: str = ''

    def __init__(self, address: ChecksumAddress, execution_client: ExecutionClient):
        self._address = address
        self.execution_client = execution_client

    @cached_property
    def contract(self) -> AsyncContract:
        current_dir = os.path.dirname(__file__)
        with open(os.path.join(current_dir, self.abi_path), encoding='utf-8') as f:
            abi = json.load(f)
        return self.execution_client.eth.contract(abi=abi, address=self._address)

    @property
    def address(self) -> ChecksumAddress:
        return self._address

    @property
    def functions(self) -> AsyncContractFunctions:
        return self.contract.functions

    @property
    def events(self) -> AsyncContractEvents:
        return self.contract.events

    async def get_block_number(self) -> BlockNumber:
        return await self.execution_client.eth.get_block_number()


class DepositContract(ContractWrapper):
    abi_path = 'abi/IDepositContract.json'

    async def get_deposit_events(
        self, from_block: BlockNumber, to_block: BlockNumber
    ) -> list[EventData]:
        """Fetches deposit events for the inclusive blocks range."""
        return await self.events.DepositEvent.get_logs(  # type: ignore
            from_block=from_block,
            to_block=to_block,
        )


class GnoTokenContract(ContractWrapper):
    abi_path = 'abi/IERC677Token.json'

    async def get_balance(self, address: ChecksumAddress) -> Wei:
        return Wei(await self.contract.functions.balanceOf(address).call())

    async def transfer_and_call(self, to: ChecksumAddress, amount: Wei, data: bytes) -> HexBytes:
        tx = await self.contract.functions.transferAndCall(to, amount, data).transact()
        return HexBytes(tx)


class DappnodeIncentiveContract(ContractWrapper):
    abi_path = 'abi/IDappnodeIncentive.json'

    async def get_user(self, address: ChecksumAddress) -> OwnerRegistration:
        """Fetches the registration of the incentive program user."""
        user = await self.contract.functions.users(address).call()
        return OwnerRegistration.from_contract(tuple(user))

    async def submit_pending_deposits(self, payload: DirectCallPayload) -> HexBytes:
        tx = await self.contract.functions.submitPendingDeposits(
            payload.pubkeys,
            payload.signatures,
            list(payload.deposit_data_roots),
        ).transact()
        return HexBytes(tx)
