import logging

from sw_utils import get_execution_client
from web3 import AsyncWeb3
from web3.middleware import SignAndSendRawMiddlewareBuilder

import deposit_operator
from deposit_operator.common.wallet import wallet
from deposit_operator.config.settings import settings

logger = logging.getLogger(__name__)

OPERATOR_USER_AGENT = f'Gnosis Deposit Operator {deposit_operator.__version__}'


class ExecutionClient:
    client: AsyncWeb3
    is_set_up = False

    def __init__(self, use_retries: bool = True) -> None:
        self.use_retries = use_retries

    async def setup(self) -> None:
        if not any(settings.execution_endpoints):
            return

        retry_timeout = 0
        if self.use_retries:
            retry_timeout = settings.execution_retry_timeout

        w3 = get_execution_client(
            settings.execution_endpoints,
            timeout=settings.execution_timeout,
            retry_timeout=retry_timeout,
            user_agent=OPERATOR_USER_AGENT,
        )
        # Account is required when emitting transactions.
        # For read-only queries account may be omitted.
        if wallet.can_load():
            w3.middleware_onion.inject(
                # pylint: disable-next=no-value-for-parameter
                SignAndSendRawMiddlewareBuilder.build(wallet.account),
                layer=0,
            )
            w3.eth.default_account = wallet.address

        self.client = w3
        self.is_set_up = True
        return None

    def __getattr__(self, item):  # type: ignore
        if not self.is_set_up:
            raise RuntimeError('Execution client is not ready. You need to call setup() method')
        return getattr(self.client, item)


async def setup_clients() -> None:
    await execution_client.setup()
    # event scanning must see provider errors to be able to split block ranges
    await execution_non_retry_client.setup()


async def close_clients() -> None:
    for client in (execution_client, execution_non_retry_client):
        if client.is_set_up:
            await client.provider.disconnect()


execution_client = ExecutionClient()
execution_non_retry_client = ExecutionClient(use_retries=False)
