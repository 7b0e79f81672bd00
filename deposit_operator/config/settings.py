from pathlib import Path

from decouple import config as decouple_config
from eth_typing import ChecksumAddress
from web3 import Web3

from deposit_operator.common.typings import Singleton
from deposit_operator.config.networks import (
    GNOSIS,
    NETWORKS,
    ZERO_CHECKSUM_ADDRESS,
    NetworkConfig,
)

DATA_DIR = Path.home() / '.deposit-operator'
CACHE_DB_FILENAME = 'deposits_cache.db'

DEFAULT_METRICS_HOST = '127.0.0.1'
DEFAULT_METRICS_PORT = 9100
DEFAULT_METRICS_PREFIX = 'deposit_operator'

# logging
LOG_PLAIN = 'plain'
LOG_JSON = 'json'
LOG_FORMATS = [LOG_PLAIN, LOG_JSON]
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_WHITELISTED_DOMAINS = ['localhost', '127.0.0.1', 'rpc.gnosischain.com', 'rpc.gnosis.gateway.fm']


# pylint: disable-next=too-many-instance-attributes
class Settings(metaclass=Singleton):
    network: str
    data_dir: Path
    execution_endpoints: list[str]
    execution_timeout: int
    execution_retry_timeout: int
    events_blocks_range_interval: int
    cache_db: Path

    dappnode: bool
    dappnode_incentive_address: ChecksumAddress
    wallet_file: Path
    wallet_password_file: Path
    wallet_private_key: str | None

    verbose: bool
    enable_metrics: bool
    metrics_host: str
    metrics_port: int

    log_level: str
    log_format: str
    web3_log_level: str

    # pylint: disable-next=too-many-arguments
    def set(
        self,
        network: str = GNOSIS,
        data_dir: Path = DATA_DIR,
        execution_endpoints: str = '',
        cache_db: str | None = None,
        dappnode: bool = False,
        dappnode_incentive_address: ChecksumAddress | None = None,
        wallet_file: str | None = None,
        wallet_password_file: str | None = None,
        verbose: bool = False,
        enable_metrics: bool = False,
        metrics_host: str = DEFAULT_METRICS_HOST,
        metrics_port: int = DEFAULT_METRICS_PORT,
        log_level: str | None = None,
        log_format: str | None = None,
    ) -> None:
        self.network = network
        self.data_dir = data_dir

        self.execution_endpoints = [
            node.strip() for node in execution_endpoints.split(',') if node.strip()
        ]
        self.cache_db = Path(cache_db) if cache_db else data_dir / CACHE_DB_FILENAME

        self.dappnode = dappnode
        if dappnode_incentive_address is None:
            dappnode_incentive_address = Web3.to_checksum_address(
                decouple_config(
                    'DAPPNODE_INCENTIVE_CONTRACT_ADDRESS',
                    default=self.network_config.DAPPNODE_INCENTIVE_CONTRACT_ADDRESS,
                )
            )
        self.dappnode_incentive_address = dappnode_incentive_address

        # wallet
        self.wallet_file = Path(wallet_file) if wallet_file else data_dir / 'wallet' / 'wallet.json'
        self.wallet_password_file = (
            Path(wallet_password_file)
            if wallet_password_file
            else data_dir / 'wallet' / 'password.txt'
        )
        self.wallet_private_key = decouple_config('WALLET_PRIVATE_KEY', default=None)

        self.verbose = verbose
        self.enable_metrics = enable_metrics
        self.metrics_host = metrics_host
        self.metrics_port = metrics_port

        self.log_level = log_level or 'INFO'
        self.log_format = log_format or LOG_PLAIN
        self.web3_log_level = decouple_config('WEB3_LOG_LEVEL', default='INFO')

        self.execution_timeout = decouple_config('EXECUTION_TIMEOUT', default=30, cast=int)
        self.execution_retry_timeout = decouple_config(
            'EXECUTION_RETRY_TIMEOUT', default=60, cast=int
        )
        self.events_blocks_range_interval = decouple_config(
            'EVENTS_BLOCKS_RANGE_INTERVAL',
            default=43200 // self.network_config.SECONDS_PER_BLOCK,  # 12 hrs
            cast=int,
        )

    @property
    def is_dappnode_incentive_set(self) -> bool:
        return self.dappnode_incentive_address != ZERO_CHECKSUM_ADDRESS

    @property
    def network_config(self) -> NetworkConfig:
        return NETWORKS[self.network]


settings = Settings()
