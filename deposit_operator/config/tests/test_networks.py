import pytest

from deposit_operator.config.networks import (
    GNOSIS,
    NETWORKS,
    get_network_config_by_chain_id,
)


def test_gnosis_network_config():
    network_config = NETWORKS[GNOSIS]

    assert network_config.CHAIN_ID == 100
    assert network_config.FORK_VERSION == '00000064'
    assert network_config.DEPOSIT_AMOUNT_GWEI == 32_000_000_000
    assert network_config.TOKEN_DEPOSIT_AMOUNT == 10**18
    assert network_config.MAX_DEPOSITS_BATCH_SIZE == 128
    assert network_config.DEPOSIT_CONTRACT_ADDRESS == (
        network_config.VALIDATORS_REGISTRY_CONTRACT_ADDRESS
    )


def test_get_network_config_by_chain_id():
    assert get_network_config_by_chain_id(100) == NETWORKS[GNOSIS]

    with pytest.raises(ValueError, match='No network configuration found for chain ID 1'):
        get_network_config_by_chain_id(1)
