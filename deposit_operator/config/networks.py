from dataclasses import asdict, dataclass

from ens.constants import EMPTY_ADDR_HEX
from eth_typing import BlockNumber, ChecksumAddress, HexStr
from eth_utils import remove_0x_prefix
from sw_utils.networks import GNOSIS
from sw_utils.networks import NETWORKS as BASE_NETWORKS
from sw_utils.networks import BaseNetworkConfig
from web3 import Web3
from web3.types import Gwei, Wei

AVAILABLE_NETWORKS = [GNOSIS]

ZERO_CHECKSUM_ADDRESS = Web3.to_checksum_address(EMPTY_ADDR_HEX)  # noqa: E501


@dataclass
class NetworkConfig(BaseNetworkConfig):
    TOKEN_SYMBOL: str
    TOKEN_CONTRACT_ADDRESS: ChecksumAddress
    DAPPNODE_INCENTIVE_CONTRACT_ADDRESS: ChecksumAddress
    # amount stored in every deposit data record
    DEPOSIT_AMOUNT_GWEI: Gwei
    # amount of tokens transferred to the deposit contract per validator
    TOKEN_DEPOSIT_AMOUNT: Wei
    MAX_DEPOSITS_BATCH_SIZE: int

    @property
    def DEPOSIT_CONTRACT_ADDRESS(self) -> ChecksumAddress:
        return self.VALIDATORS_REGISTRY_CONTRACT_ADDRESS

    @property
    def DEPOSIT_START_BLOCK(self) -> BlockNumber:
        return self.VALIDATORS_REGISTRY_GENESIS_BLOCK

    @property
    def FORK_VERSION(self) -> HexStr:
        """
        Returns the genesis fork version in the deposit data format,
        lowercase hex without the `0x` prefix.
        """
        return HexStr(remove_0x_prefix(Web3.to_hex(self.GENESIS_FORK_VERSION)).lower())


NETWORKS: dict[str, NetworkConfig] = {
    GNOSIS: NetworkConfig(
        **asdict(BASE_NETWORKS[GNOSIS]),
        TOKEN_SYMBOL='GNO',
        TOKEN_CONTRACT_ADDRESS=Web3.to_checksum_address(
            '0x9C58BAcC331c9aa871AFD802DB6379a98e80CEdb'
        ),
        DAPPNODE_INCENTIVE_CONTRACT_ADDRESS=ZERO_CHECKSUM_ADDRESS,
        DEPOSIT_AMOUNT_GWEI=Gwei(32_000_000_000),  # 32 mGNO
        TOKEN_DEPOSIT_AMOUNT=Web3.to_wei(1, 'ether'),  # 1 GNO
        MAX_DEPOSITS_BATCH_SIZE=128,
    ),
}


def get_network_config_by_chain_id(chain_id: int) -> NetworkConfig:
    for network_config in NETWORKS.values():
        if network_config.CHAIN_ID == chain_id:
            return network_config

    raise ValueError(f'No network configuration found for chain ID {chain_id}')
