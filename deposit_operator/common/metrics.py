import logging

from prometheus_client import Counter, Gauge, Info, start_http_server

import deposit_operator
from deposit_operator.config.settings import DEFAULT_METRICS_PREFIX, settings

logger = logging.getLogger(__name__)


# pylint: disable=too-few-public-methods
class Metrics:
    def __init__(self) -> None:
        self.app_version = Info(
            'app_version',
            'Deposit operator version',
            namespace=DEFAULT_METRICS_PREFIX,
            labelnames=['network'],
        )
        self.deposit_checks = Counter(
            'deposit_checks',
            'The number of deposit data checks by check name and result',
            namespace=DEFAULT_METRICS_PREFIX,
            labelnames=['network', 'check', 'result'],
        )
        self.reconciled_public_keys = Gauge(
            'reconciled_public_keys',
            'The number of public keys already deposited to the deposit contract',
            namespace=DEFAULT_METRICS_PREFIX,
            labelnames=['network'],
        )
        self.reconciled_block = Gauge(
            'reconciled_block',
            'The last block of the reconciled deposits history',
            namespace=DEFAULT_METRICS_PREFIX,
            labelnames=['network'],
        )

    def set_app_version(self) -> None:
        self.app_version.labels(network=settings.network).info(
            {'version': deposit_operator.__version__}
        )


metrics = Metrics()


async def metrics_server() -> None:
    logger.info('starting metrics server at %s:%s', settings.metrics_host, settings.metrics_port)
    start_http_server(settings.metrics_port, settings.metrics_host)
