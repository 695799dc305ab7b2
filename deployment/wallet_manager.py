"""
Wallet Manager
Loads the deployer account from a network's signing credential
"""

from typing import Dict
from eth_account import Account
from loguru import logger

from .errors import SubmissionFailed
from .network_config import NetworkProfile


class DeployerWallet:
    """
    Signs contract-creation transactions for one network

    The private key stays inside the eth_account LocalAccount; only the
    address is ever logged.
    """

    def __init__(self, account, network: str):
        self.account = account
        self.address = account.address
        self.network = network

    @classmethod
    def from_profile(cls, profile: NetworkProfile) -> "DeployerWallet":
        """
        Build the wallet for a network profile

        Args:
            profile: Resolved network profile with a signing credential

        Returns:
            DeployerWallet

        Raises:
            SubmissionFailed: credential missing or not a valid private key
        """
        credential = profile.signing_credential

        if credential is None:
            raise SubmissionFailed(f"No signing credential configured for '{profile.identifier}'")

        try:
            account = Account.from_key(credential.reveal())
        except Exception:
            # Chained error text could echo the key material
            raise SubmissionFailed(
                f"Signing credential from {credential.source} is not a valid private key"
            ) from None

        logger.info(f"Deployer wallet for {profile.identifier}: {account.address}")
        return cls(account, profile.identifier)

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer key

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self.account.sign_transaction(transaction)
        except (ValueError, TypeError) as e:
            logger.error(f"Error signing transaction: {e}")
            raise SubmissionFailed(f"Could not sign transaction: {e}") from None

    def __repr__(self) -> str:
        return f"DeployerWallet(network={self.network!r}, address={self.address!r})"
