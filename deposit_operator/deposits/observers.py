import logging

from deposit_operator.common.metrics import metrics
from deposit_operator.deposits.typings import ReconciledSet

logger = logging.getLogger(__name__)


class PipelineObserver:
    """
    Receives the deposit data pipeline events:
    reconciliation start and end, every constraint check result.
    """

    def reconciliation_started(self, chain_id: int, start_block: int) -> None:
        pass

    def reconciliation_finished(self, chain_id: int, reconciled: ReconciledSet) -> None:
        pass

    def check_passed(self, check: str) -> None:
        pass

    def check_failed(self, check: str, error: Exception) -> None:
        pass


class LoggingObserver(PipelineObserver):
    def reconciliation_started(self, chain_id: int, start_block: int) -> None:
        logger.info('Fetching existing deposits for chain %d...', chain_id)
        logger.debug('Deposit contract start block: %d', start_block)

    def reconciliation_finished(self, chain_id: int, reconciled: ReconciledSet) -> None:
        logger.info(
            'Found %d existing deposits up to block %d', len(reconciled), reconciled.last_block
        )

    def check_passed(self, check: str) -> None:
        logger.debug('Deposit data check passed: %s', check)

    def check_failed(self, check: str, error: Exception) -> None:
        logger.debug('Deposit data check failed: %s, %s', check, error)


class MetricsObserver(LoggingObserver):
    def __init__(self, network: str) -> None:
        self.network = network

    def reconciliation_finished(self, chain_id: int, reconciled: ReconciledSet) -> None:
        super().reconciliation_finished(chain_id, reconciled)
        metrics.reconciled_public_keys.labels(network=self.network).set(len(reconciled))
        metrics.reconciled_block.labels(network=self.network).set(reconciled.last_block)

    def check_passed(self, check: str) -> None:
        super().check_passed(check)
        metrics.deposit_checks.labels(network=self.network, check=check, result='passed').inc()

    def check_failed(self, check: str, error: Exception) -> None:
        super().check_failed(check, error)
        metrics.deposit_checks.labels(network=self.network, check=check, result='failed').inc()
