"""
Unit Tests for the Network Configuration Store
"""

import pytest

from deployment.errors import UnknownNetwork
from deployment.network_config import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    NetworkConfigStore,
    NetworkProfile,
    SigningCredential,
)

from conftest import NETWORKS_CONFIG

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def env_store():
    """Store with a deployer key and an RPC override in the environment"""
    environ = {
        'DEPLOYER_PRIVATE_KEY': TEST_KEY,
        'BLAST_SEPOLIA_RPC_URL': 'https://blast-sepolia.example.io/v2/secret-api-key',
    }
    return NetworkConfigStore.from_file(str(NETWORKS_CONFIG), environ=environ)


class TestResolve:
    """Test network lookup"""

    def test_zksync_endpoint(self, network_store):
        profile = network_store.resolve("zkSync")

        assert profile.rpc_endpoint == "https://mainnet.era.zksync.io"
        assert profile.chain_id == 324

    def test_unknown_network(self, network_store):
        with pytest.raises(UnknownNetwork) as exc_info:
            network_store.resolve("unknown_net")

        assert exc_info.value.identifier == "unknown_net"
        assert "zkSync" in str(exc_info.value)

    def test_resolve_is_pure(self, network_store):
        first = network_store.resolve("blast_sepolia")
        second = network_store.resolve("blast_sepolia")

        assert first is second
        assert first == second

    def test_profiles_are_immutable(self, network_store):
        profile = network_store.resolve("zkSync")

        with pytest.raises(AttributeError):
            profile.rpc_endpoint = "https://evil.example"

    def test_hardhat_is_ephemeral(self, network_store):
        profile = network_store.resolve("hardhat")

        assert profile.ephemeral
        assert not profile.has_credential
        assert profile.rpc_endpoint is None

    def test_blast_sepolia_options(self, network_store):
        profile = network_store.resolve("blast_sepolia")

        assert profile.rpc_endpoint == "https://sepolia.blast.io"
        assert profile.gas_price_override == 1_000_000_000
        assert profile.persist_deployment_record
        assert profile.confirmation_timeout == DEFAULT_CONFIRMATION_TIMEOUT

    def test_zksync_has_network_pricing(self, network_store):
        profile = network_store.resolve("zkSync")

        assert profile.gas_price_override is None
        assert not profile.persist_deployment_record

    def test_default_network(self, network_store):
        assert network_store.default_network == "hardhat"
        assert "hardhat" in network_store
        assert "mainnet" not in network_store


class TestEnvironment:
    """Test credential and endpoint loading from the environment"""

    def test_credential_loaded(self, env_store):
        profile = env_store.resolve("zkSync")

        assert profile.has_credential
        assert profile.signing_credential.reveal() == TEST_KEY
        assert profile.signing_credential.source == "DEPLOYER_PRIVATE_KEY"

    def test_no_credential_without_env(self, network_store):
        assert not network_store.resolve("zkSync").has_credential

    def test_rpc_override(self, env_store):
        profile = env_store.resolve("blast_sepolia")

        assert profile.rpc_endpoint.startswith("https://blast-sepolia.example.io")

    def test_secrets_listed_for_redaction(self, env_store):
        assert TEST_KEY in env_store.secrets()


class TestSecretHygiene:
    """Credential values must never render"""

    def test_credential_repr(self):
        credential = SigningCredential(TEST_KEY, source="DEPLOYER_PRIVATE_KEY")

        assert TEST_KEY not in repr(credential)
        assert TEST_KEY not in str(credential)
        assert "DEPLOYER_PRIVATE_KEY" in repr(credential)

    def test_profile_repr(self, env_store):
        profile = env_store.resolve("blast_sepolia")

        assert TEST_KEY not in repr(profile)
        assert TEST_KEY not in str(profile)

    def test_display_endpoint_drops_path(self, env_store):
        profile = env_store.resolve("blast_sepolia")

        assert profile.display_endpoint == "https://blast-sepolia.example.io"
        assert "secret-api-key" not in profile.display_endpoint

    def test_display_endpoint_ephemeral(self):
        profile = NetworkProfile(identifier="hardhat", ephemeral=True)

        assert "eth-tester" in profile.display_endpoint


def test_from_dict_minimal():
    store = NetworkConfigStore.from_dict(
        {'networks': {'local': {'rpc_url': 'http://127.0.0.1:8545', 'gas_price': '2000000000'}}},
        environ={}
    )

    profile = store.resolve('local')
    assert profile.gas_price_override == 2_000_000_000
    assert store.default_network == 'hardhat'
    assert store.network_names() == ['local']
