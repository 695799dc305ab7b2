"""
Network Configuration Store
Resolves network names to immutable connection profiles
"""

import os
import json
from urllib.parse import urlsplit
from dataclasses import dataclass, field
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from .errors import UnknownNetwork

load_dotenv()

DEFAULT_CONFIG_PATH = "config/networks.json"
DEFAULT_CONFIRMATION_TIMEOUT = 120


class SigningCredential:
    """
    Write-only wrapper around a deployer private key

    The value is only reachable through reveal(); repr and str never show it.
    """

    __slots__ = ("_value", "source")

    def __init__(self, value: str, source: str):
        self._value = value
        self.source = source

    def reveal(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"SigningCredential(source={self.source!r}, value='********')"

    __str__ = __repr__

    def __eq__(self, other) -> bool:
        if not isinstance(other, SigningCredential):
            return NotImplemented
        return self._value == other._value and self.source == other.source

    def __hash__(self) -> int:
        return hash((self.source, self._value))


@dataclass(frozen=True)
class NetworkProfile:
    """Connection parameters for one named network"""

    identifier: str
    rpc_endpoint: Optional[str] = None
    signing_credential: Optional[SigningCredential] = field(default=None, repr=False)
    gas_price_override: Optional[int] = None
    persist_deployment_record: bool = False
    chain_id: Optional[int] = None
    ephemeral: bool = False
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT

    @property
    def has_credential(self) -> bool:
        return self.signing_credential is not None

    @property
    def display_endpoint(self) -> str:
        """Endpoint without path or query, which often embed API keys"""
        if self.ephemeral:
            return "in-process eth-tester chain"
        if not self.rpc_endpoint:
            return "<no rpc endpoint>"

        parts = urlsplit(self.rpc_endpoint)
        return f"{parts.scheme}://{parts.hostname or ''}"


class NetworkConfigStore:
    """
    Static registry of network profiles

    Profiles are built once from config/networks.json and the environment;
    resolve() is a pure lookup afterwards.
    """

    def __init__(self, profiles: Dict[str, NetworkProfile], default_network: str = "hardhat"):
        """
        Initialize the store

        Args:
            profiles: Mapping of network identifier to profile
            default_network: Network used when the caller names none
        """
        self._profiles = dict(profiles)
        self.default_network = default_network

        logger.debug(f"Network store loaded: {', '.join(sorted(self._profiles))}")

    @classmethod
    def from_file(cls, config_path: str = DEFAULT_CONFIG_PATH, environ=None) -> "NetworkConfigStore":
        """
        Build the store from a JSON configuration file

        Args:
            config_path: Path to networks.json
            environ: Environment mapping (defaults to os.environ)

        Returns:
            NetworkConfigStore
        """
        with open(config_path, 'r') as f:
            config = json.load(f)

        return cls.from_dict(config, environ=environ)

    @classmethod
    def from_dict(cls, config: Dict, environ=None) -> "NetworkConfigStore":
        """Build the store from an already parsed configuration mapping"""
        env = os.environ if environ is None else environ

        profiles = {
            name: _build_profile(name, network_config, env)
            for name, network_config in config['networks'].items()
        }

        return cls(profiles, default_network=config.get('default_network', 'hardhat'))

    def resolve(self, identifier: str) -> NetworkProfile:
        """
        Resolve a network identifier

        Args:
            identifier: Network name, e.g. 'zkSync'

        Returns:
            NetworkProfile

        Raises:
            UnknownNetwork: identifier is not configured
        """
        try:
            return self._profiles[identifier]
        except KeyError:
            raise UnknownNetwork(identifier, list(self._profiles)) from None

    def network_names(self) -> list:
        return sorted(self._profiles)

    def secrets(self) -> list:
        """Credential values, for log redaction only"""
        return [
            profile.signing_credential.reveal()
            for profile in self._profiles.values()
            if profile.signing_credential is not None
        ]

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._profiles


def _build_profile(name: str, network_config: Dict, env) -> NetworkProfile:
    """Translate one networks.json entry into a NetworkProfile"""
    rpc_url = network_config.get('rpc_url')

    rpc_url_env = network_config.get('rpc_url_env')
    if rpc_url_env and env.get(rpc_url_env):
        rpc_url = env[rpc_url_env]

    credential = None
    accounts_env = network_config.get('accounts_env')
    if accounts_env:
        key = env.get(accounts_env)
        if key:
            credential = SigningCredential(key.strip(), source=accounts_env)
        else:
            logger.debug(f"{accounts_env} not set - network '{name}' has no signing credential")

    gas_price = network_config.get('gas_price')
    chain_id = network_config.get('chain_id')

    return NetworkProfile(
        identifier=name,
        rpc_endpoint=rpc_url,
        signing_credential=credential,
        gas_price_override=int(gas_price) if gas_price is not None else None,
        persist_deployment_record=bool(network_config.get('save_deployments', False)),
        chain_id=int(chain_id) if chain_id is not None else None,
        ephemeral=bool(network_config.get('ephemeral', False)),
        confirmation_timeout=float(
            network_config.get('confirmation_timeout', DEFAULT_CONFIRMATION_TIMEOUT)
        ),
    )
