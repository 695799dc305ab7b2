"""
PetRace Deployment
Deploys the PetRace contract to a configured network

Usage:
    python deploy.py --network blast_sepolia --fee-recipient 0x...
    python deploy.py --network blast_sepolia --check-tx 0x<hash>
"""

import os
import sys
import argparse
from typing import Union
from loguru import logger
from dotenv import load_dotenv

from deployment import (
    BuildConfig,
    ContractDeployer,
    ContractRegistry,
    DeploymentError,
    DeploymentResult,
    DeploymentTimeout,
    NetworkConfigStore,
    PET_RACE,
)
from deployment.address_validation import validate_address
from deployment.build_config import DEFAULT_BUILD_CONFIG_PATH
from deployment.compiler import SolidityCompiler
from deployment.deployment_records import DEFAULT_RECORDS_DIR, DeploymentRecords
from deployment.network_config import DEFAULT_CONFIG_PATH
from utils.logging_config import setup_logging

load_dotenv()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy the PetRace contract")
    parser.add_argument('--network', default=None,
                        help="Network name from the networks config (default: config default)")
    parser.add_argument('--fee-recipient', default=os.getenv('PLATFORM_FEE_ADDRESS'),
                        help="Platform fee recipient address (env: PLATFORM_FEE_ADDRESS)")
    parser.add_argument('--contract', default=PET_RACE.name,
                        help="Registered contract name or qualified name")
    parser.add_argument('--check-tx', default=None, metavar='TX_HASH',
                        help="Re-query a previous creation transaction instead of deploying")
    parser.add_argument('--networks-config', default=DEFAULT_CONFIG_PATH)
    parser.add_argument('--build-config', default=DEFAULT_BUILD_CONFIG_PATH)
    parser.add_argument('--artifacts', default=None, help="Artifacts directory override")
    parser.add_argument('--records-dir', default=DEFAULT_RECORDS_DIR)
    parser.add_argument('--timeout', type=float, default=None,
                        help="Seconds to wait for the receipt (default: per network)")
    parser.add_argument('--yes', action='store_true',
                        help="Skip the confirmation prompt on live networks")
    parser.add_argument('--log-level', default='INFO')
    parser.add_argument('--log-file', default='data/logs/deploy.log',
                        help="Debug log file, empty string to disable")

    args = parser.parse_args(argv)

    if not args.check_tx and not args.fee_recipient:
        parser.error("--fee-recipient (or PLATFORM_FEE_ADDRESS) is required")

    return args


def build_deployer(args: argparse.Namespace, network_store: NetworkConfigStore) -> ContractDeployer:
    """Wire store, registry and compiler from CLI options"""
    if os.path.exists(args.build_config):
        build_config = BuildConfig.from_file(args.build_config)
    else:
        logger.warning(f"{args.build_config} not found, using default compiler settings")
        build_config = BuildConfig()

    registry = ContractRegistry(
        build_config=build_config,
        compiler=SolidityCompiler(build_config),
        artifacts_dir=args.artifacts
    )

    return ContractDeployer(
        network_store,
        registry,
        records=DeploymentRecords(args.records_dir),
        confirmation_timeout=args.timeout
    )


def run_deployment(
    deployer: ContractDeployer,
    network: str,
    fee_recipient: str,
    contract_id: str = PET_RACE.name
) -> Union[DeploymentResult, DeploymentError]:
    """
    Deploy and return either the result or the failure

    Args:
        deployer: Configured ContractDeployer
        network: Network name
        fee_recipient: Platform fee recipient
        contract_id: Registered contract

    Returns:
        DeploymentResult on success, the DeploymentError otherwise
    """
    try:
        return deployer.deploy(network, fee_recipient, contract_id=contract_id)
    except DeploymentError as e:
        return e


def confirm_deployment(network: str, contract_id: str) -> bool:
    """Ask before spending real funds; every run creates a new contract"""
    answer = input(
        f"\nDeploy a NEW {contract_id} instance to {network}? "
        f"This cannot be undone. (yes/no): "
    )
    return answer.strip().lower() == 'yes'


def check_transaction(deployer: ContractDeployer, network: str, tx_hash: str) -> int:
    try:
        status = deployer.check_deployment(network, tx_hash)
    except DeploymentError as e:
        logger.error(f"Status check failed: {e}")
        return 1

    if status.result is not None:
        print(f"{tx_hash} confirmed: {status.result.contract_address}")
    else:
        print(f"{tx_hash} {status.state.value}")

    return 0


def main(argv=None) -> int:
    """CLI entry point; returns the process exit code"""
    args = parse_args(argv)

    try:
        network_store = NetworkConfigStore.from_file(args.networks_config)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Cannot load network config {args.networks_config}: {e}")
        return 1

    setup_logging(args.log_level, log_file=args.log_file or None, secrets=network_store.secrets())

    network = args.network or network_store.default_network
    deployer = build_deployer(args, network_store)

    if args.check_tx:
        return check_transaction(deployer, network, args.check_tx)

    logger.info("=" * 70)
    logger.info(f"{args.contract} Deployment -> {network}")
    logger.info("=" * 70)

    try:
        fee_recipient = validate_address(args.fee_recipient, label="fee recipient")
        profile = network_store.resolve(network)
    except DeploymentError as e:
        logger.error(f"Deployment failed: {e}")
        return 1

    if not profile.ephemeral and not args.yes:
        if not confirm_deployment(network, args.contract):
            logger.info("Deployment cancelled")
            return 1

    outcome = run_deployment(deployer, network, fee_recipient, contract_id=args.contract)

    if isinstance(outcome, DeploymentError):
        logger.error(f"Deployment failed ({type(outcome).__name__}): {outcome}")
        if isinstance(outcome, DeploymentTimeout) and not profile.ephemeral:
            logger.warning(
                f"Do not redeploy blindly. Check: python deploy.py --network {network} "
                f"--check-tx {outcome.tx_hash}"
            )
        return 1

    print(f"{args.contract} deployed to: {outcome.contract_address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
