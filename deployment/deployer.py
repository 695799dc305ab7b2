"""
Contract Deployer
Submits contract-creation transactions and waits for confirmation
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional
from web3 import Web3
from web3.exceptions import TimeExhausted, TransactionNotFound, Web3Exception
from web3.providers.eth_tester import EthereumTesterProvider
from loguru import logger

from utils.gas_calculator import GasCalculator

from .address_validation import is_valid_contract_address, validate_address
from .contract_registry import PET_RACE, ContractRegistry
from .deployment_records import DeploymentRecords
from .errors import DeploymentTimeout, NetworkUnavailable, SubmissionFailed
from .network_config import NetworkConfigStore, NetworkProfile
from .wallet_manager import DeployerWallet

DEFAULT_POLL_LATENCY = 0.5
HTTP_REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of one confirmed contract creation"""

    contract_address: str
    transaction_hash: str
    confirmed: bool
    network: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None


class DeploymentState(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class DeploymentStatus:
    """Answer to a re-query by transaction hash"""

    state: DeploymentState
    transaction_hash: str
    result: Optional[DeploymentResult] = None


def connect(profile: NetworkProfile) -> Web3:
    """
    Default Web3 factory

    Args:
        profile: Network profile

    Returns:
        Web3 bound to the profile's endpoint, or to a fresh in-process
        chain for ephemeral networks
    """
    if profile.ephemeral:
        return Web3(EthereumTesterProvider())

    if not profile.rpc_endpoint:
        raise NetworkUnavailable(f"Network '{profile.identifier}' has no RPC endpoint configured")

    return Web3(Web3.HTTPProvider(
        profile.rpc_endpoint,
        request_kwargs={'timeout': HTTP_REQUEST_TIMEOUT}
    ))


class ContractDeployer:
    """
    Deployment orchestrator

    Each deploy() call creates a new contract instance; there is no
    idempotence and no automatic retry.
    """

    def __init__(
        self,
        network_store: NetworkConfigStore,
        registry: ContractRegistry,
        web3_factory: Callable[[NetworkProfile], Web3] = connect,
        records: Optional[DeploymentRecords] = None,
        confirmation_timeout: Optional[float] = None,
        poll_latency: float = DEFAULT_POLL_LATENCY
    ):
        """
        Initialize Contract Deployer

        Args:
            network_store: Resolves network identifiers to profiles
            registry: Resolves contract identifiers to artifacts
            web3_factory: Builds a Web3 connection for a profile
            records: Writer for networks with save_deployments enabled
            confirmation_timeout: Overrides every profile's receipt timeout
            poll_latency: Seconds between receipt polls
        """
        self.network_store = network_store
        self.registry = registry
        self.web3_factory = web3_factory
        self.records = records or DeploymentRecords()
        self.confirmation_timeout = confirmation_timeout
        self.poll_latency = poll_latency

        # One connection per network so re-queries reach the same chain
        self._connections: Dict[str, Web3] = {}

    def get_web3(self, profile: NetworkProfile) -> Web3:
        """Get (or open) the connection for a network"""
        w3 = self._connections.get(profile.identifier)
        if w3 is not None:
            return w3

        logger.info(f"Connecting to {profile.identifier} ({profile.display_endpoint})")
        w3 = self.web3_factory(profile)

        if not w3.is_connected():
            raise NetworkUnavailable(
                f"Failed to connect to {profile.identifier} ({profile.display_endpoint})"
            )

        self._connections[profile.identifier] = w3
        return w3

    def deploy(
        self,
        network_identifier: str,
        fee_recipient: str,
        contract_id: str = PET_RACE.name
    ) -> DeploymentResult:
        """
        Deploy a contract with the platform-fee recipient as constructor argument

        Args:
            network_identifier: Configured network name
            fee_recipient: Platform-fee recipient address
            contract_id: Registered contract to deploy

        Returns:
            Confirmed DeploymentResult

        Raises:
            InvalidConstructorArgument: fee_recipient is malformed (raised
                before any network call)
            UnknownNetwork: network_identifier is not configured
            CompilationFailed: artifact could not be produced
            SubmissionFailed: node rejected the transaction or it reverted
            DeploymentTimeout: no receipt within the confirmation bound
        """
        recipient = validate_address(fee_recipient, label="fee recipient")
        profile = self.network_store.resolve(network_identifier)
        artifact = self.registry.get_artifact(contract_id)

        wallet = DeployerWallet.from_profile(profile) if profile.has_credential else None

        logger.info(f"Deploying {artifact.contract_name} to {profile.identifier}")
        logger.info(f"Fee recipient: {recipient}")

        w3 = self.get_web3(profile)

        try:
            self._check_chain_id(w3, profile)

            sender = wallet.address if wallet else self._default_sender(w3, profile)
            logger.info(f"Deploying from: {sender}")

            contract = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
            constructor = contract.constructor(recipient)

            gas_calculator = GasCalculator(w3)
            gas_limit = gas_calculator.estimate_gas_limit(constructor, sender)
            pricing = gas_calculator.get_pricing(profile.gas_price_override)
            self._check_balance(w3, sender, gas_calculator.estimate_deployment_cost(gas_limit, pricing))
        except OSError as e:
            raise self._connection_lost(profile, e) from None

        tx_hash = self._submit(w3, profile, constructor, sender, wallet, gas_limit, pricing)
        logger.info(f"Transaction sent: {tx_hash}")

        receipt = self._wait_for_receipt(w3, tx_hash, profile)
        result = self._build_result(profile, tx_hash, receipt)

        logger.success(f"{artifact.contract_name} deployed at {result.contract_address}")
        logger.success(f"Transaction hash: {tx_hash}")
        logger.success(f"Gas used: {result.gas_used}")

        if profile.persist_deployment_record:
            try:
                self.records.save(result, artifact, [recipient])
            except OSError as e:
                logger.warning(
                    f"Could not write deployment record for {result.contract_address} "
                    f"to {self.records.records_dir}: {e}"
                )

        return result

    def check_deployment(self, network_identifier: str, tx_hash: str) -> DeploymentStatus:
        """
        Re-query a creation transaction by hash

        Resolves the ambiguous outcome left by a DeploymentTimeout.

        Args:
            network_identifier: Network the transaction was sent to
            tx_hash: Creation transaction hash

        Returns:
            DeploymentStatus (PENDING, CONFIRMED with result, or FAILED)
        """
        profile = self.network_store.resolve(network_identifier)
        w3 = self.get_web3(profile)

        try:
            receipt = w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            receipt = None
        except OSError as e:
            raise self._connection_lost(profile, e) from None

        if receipt is None or receipt.get('blockNumber') is None:
            logger.info(f"{tx_hash} not mined yet")
            return DeploymentStatus(DeploymentState.PENDING, tx_hash)

        if receipt['status'] != 1:
            logger.warning(f"{tx_hash} was mined but reverted")
            return DeploymentStatus(DeploymentState.FAILED, tx_hash)

        result = self._build_result(profile, tx_hash, receipt)
        logger.info(f"{tx_hash} confirmed: contract at {result.contract_address}")
        return DeploymentStatus(DeploymentState.CONFIRMED, tx_hash, result)

    def _connection_lost(self, profile: NetworkProfile, error: OSError) -> NetworkUnavailable:
        # Transport errors can embed the full URL, so only the error type is reported
        return NetworkUnavailable(
            f"Connection to {profile.identifier} ({profile.display_endpoint}) failed: "
            f"{type(error).__name__}"
        )

    def _check_chain_id(self, w3: Web3, profile: NetworkProfile):
        if profile.chain_id is None:
            return

        remote_chain_id = w3.eth.chain_id
        if remote_chain_id != profile.chain_id:
            raise SubmissionFailed(
                f"{profile.identifier} expects chain id {profile.chain_id}, "
                f"endpoint reports {remote_chain_id}"
            )

    def _default_sender(self, w3: Web3, profile: NetworkProfile) -> str:
        """First unlocked node account, for networks without a credential"""
        accounts = w3.eth.accounts

        if not accounts:
            raise SubmissionFailed(
                f"No signing credential configured for '{profile.identifier}' "
                f"and the node exposes no unlocked accounts"
            )

        return accounts[0]

    def _check_balance(self, w3: Web3, sender: str, cost_wei: int):
        balance = w3.eth.get_balance(sender)
        logger.info(f"Account balance: {w3.from_wei(balance, 'ether')} ETH")

        if balance < cost_wei:
            raise SubmissionFailed(
                f"Insufficient balance for deployment: have {balance} wei, "
                f"need up to {cost_wei} wei"
            )

    def _submit(
        self,
        w3: Web3,
        profile: NetworkProfile,
        constructor,
        sender: str,
        wallet,
        gas_limit: int,
        pricing: Dict
    ) -> str:
        """Sign (or hand to the node) and broadcast the creation transaction"""
        try:
            if wallet is not None:
                transaction = constructor.build_transaction({
                    'from': sender,
                    'nonce': w3.eth.get_transaction_count(sender, 'pending'),
                    'gas': gas_limit,
                    'chainId': w3.eth.chain_id,
                    **pricing
                })
                signed_tx = wallet.sign_transaction(transaction)
                tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            else:
                tx_hash = constructor.transact({'from': sender, 'gas': gas_limit, **pricing})
        except (Web3Exception, ValueError) as e:
            raise SubmissionFailed(f"Creation transaction rejected: {e}") from e
        except OSError as e:
            # The node may or may not have received the transaction
            raise SubmissionFailed(
                f"Connection to {profile.identifier} ({profile.display_endpoint}) failed "
                f"while submitting ({type(e).__name__}); check the deployer's pending "
                f"transactions before retrying"
            ) from None

        return Web3.to_hex(tx_hash)

    def _wait_for_receipt(self, w3: Web3, tx_hash: str, profile: NetworkProfile):
        timeout = self.confirmation_timeout or profile.confirmation_timeout
        logger.info(f"Waiting for confirmation (up to {timeout:g}s)...")

        try:
            receipt = w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=timeout,
                poll_latency=self.poll_latency
            )
        except TimeExhausted:
            logger.warning(f"No receipt for {tx_hash} after {timeout:g}s")
            raise DeploymentTimeout(tx_hash, timeout) from None
        except OSError as e:
            logger.warning(f"Lost connection while waiting for {tx_hash} ({type(e).__name__})")
            raise DeploymentTimeout(tx_hash, timeout) from None

        if receipt['status'] != 1:
            logger.error(f"Deployment reverted: {tx_hash}")
            raise SubmissionFailed("Creation transaction reverted", tx_hash=tx_hash)

        return receipt

    def _build_result(self, profile: NetworkProfile, tx_hash: str, receipt) -> DeploymentResult:
        contract_address = receipt.get('contractAddress')

        if contract_address:
            contract_address = Web3.to_checksum_address(contract_address)

        if not is_valid_contract_address(contract_address):
            raise SubmissionFailed(
                f"Receipt for {tx_hash} carries no valid contract address",
                tx_hash=tx_hash
            )

        return DeploymentResult(
            contract_address=contract_address,
            transaction_hash=tx_hash,
            confirmed=True,
            network=profile.identifier,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed'),
        )
