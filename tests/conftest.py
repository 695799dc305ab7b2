"""
Shared test fixtures

The PetRace artifact under tests/fixtures is a stub: same constructor ABI as
the real contract, init code that deploys a one-byte runtime.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest
from web3 import Web3
from web3.providers.eth_tester import EthereumTesterProvider

from deployment.build_config import BuildConfig
from deployment.contract_registry import ContractRegistry
from deployment.deployer import ContractDeployer
from deployment.deployment_records import DeploymentRecords
from deployment.network_config import NetworkConfigStore, NetworkProfile

ROOT = Path(__file__).resolve().parents[1]
FIXTURES = Path(__file__).resolve().parent / "fixtures"
NETWORKS_CONFIG = ROOT / "config" / "networks.json"
BUILD_CONFIG = ROOT / "config" / "build_config.json"
ARTIFACTS_DIR = FIXTURES / "artifacts"

FEE_RECIPIENT = "0xF2b4aEC71F3a772fDE47Bf80B457d72A03d78Aae"


@pytest.fixture
def network_store():
    """Store built from the shipped config, with an empty environment"""
    return NetworkConfigStore.from_file(str(NETWORKS_CONFIG), environ={})


@pytest.fixture
def registry():
    return ContractRegistry(BuildConfig(), artifacts_dir=str(ARTIFACTS_DIR))


@pytest.fixture
def w3():
    """In-process chain with funded, unlocked accounts"""
    return Web3(EthereumTesterProvider())


@pytest.fixture
def records(tmp_path):
    return DeploymentRecords(str(tmp_path / "deployments"))


@pytest.fixture
def deployer(network_store, registry, w3, records):
    """Deployer whose every network resolves to the shared in-process chain"""
    return ContractDeployer(
        network_store,
        registry,
        web3_factory=lambda profile: w3,
        records=records,
        poll_latency=0.01
    )


@pytest.fixture
def recording_factory():
    """Web3 factory that records calls instead of connecting"""
    factory = Mock(side_effect=AssertionError("network must not be contacted"))
    return factory


def make_store(*profiles: NetworkProfile) -> NetworkConfigStore:
    return NetworkConfigStore({profile.identifier: profile for profile in profiles})
