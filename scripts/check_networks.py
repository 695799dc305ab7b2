"""
Network Check Script
Verifies network profiles, credentials and build inputs before deploying
"""

import os
import sys
from typing import Callable, Optional
from web3.exceptions import Web3Exception
from loguru import logger
from dotenv import load_dotenv

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from deployment.build_config import BuildConfig, DEFAULT_BUILD_CONFIG_PATH  # noqa: E402
from deployment.contract_registry import CONTRACTS  # noqa: E402
from deployment.deployer import connect  # noqa: E402
from deployment.errors import DeploymentError  # noqa: E402
from deployment.network_config import NetworkConfigStore, NetworkProfile, DEFAULT_CONFIG_PATH  # noqa: E402
from deployment.wallet_manager import DeployerWallet  # noqa: E402

load_dotenv()

# Below this a live deployment is likely to run out of gas
MIN_DEPLOYER_BALANCE_ETH = 0.01


def check_credentials(store: NetworkConfigStore) -> bool:
    """Every live network needs a loadable signing credential"""
    logger.info("Checking signing credentials...")

    ok = True
    for name in store.network_names():
        profile = store.resolve(name)

        if profile.ephemeral:
            logger.success(f"  ✓ {name}: ephemeral, no credential needed")
            continue

        if not profile.has_credential:
            logger.warning(f"  ✗ {name}: no signing credential set")
            ok = False
            continue

        try:
            wallet = DeployerWallet.from_profile(profile)
            logger.success(f"  ✓ {name}: deployer {wallet.address}")
        except DeploymentError as e:
            logger.error(f"  ✗ {name}: {e}")
            ok = False

    return ok


def check_network(profile: NetworkProfile, web3_factory: Callable = connect) -> bool:
    """Connectivity, chain id and deployer balance for one network"""
    try:
        w3 = web3_factory(profile)
        if not w3.is_connected():
            logger.error(f"  ✗ {profile.identifier}: connection failed ({profile.display_endpoint})")
            return False

        chain_id = w3.eth.chain_id
        block = w3.eth.block_number
    except (DeploymentError, Web3Exception, OSError, ValueError) as e:
        logger.error(f"  ✗ {profile.identifier}: {e}")
        return False

    if profile.chain_id is not None and chain_id != profile.chain_id:
        logger.error(
            f"  ✗ {profile.identifier}: chain id {chain_id}, expected {profile.chain_id}"
        )
        return False

    logger.success(f"  ✓ {profile.identifier}: connected (chain {chain_id}, block {block})")

    if profile.has_credential:
        try:
            wallet = DeployerWallet.from_profile(profile)
        except DeploymentError as e:
            logger.error(f"  ✗ {profile.identifier}: {e}")
            return False

        balance = w3.from_wei(w3.eth.get_balance(wallet.address), 'ether')
        logger.info(f"    Deployer balance: {balance:.4f} ETH")

        if balance < MIN_DEPLOYER_BALANCE_ETH:
            logger.warning(
                f"    ⚠ Balance low (need at least {MIN_DEPLOYER_BALANCE_ETH} ETH)"
            )

    return True


def check_rpc_connections(store: NetworkConfigStore, web3_factory: Callable = connect) -> bool:
    logger.info("Checking RPC connections...")

    results = [
        check_network(store.resolve(name), web3_factory)
        for name in store.network_names()
    ]

    logger.info(f"{sum(results)}/{len(results)} networks reachable")
    return all(results)


def check_build_inputs(build_config: BuildConfig, project_root: str = ".") -> bool:
    """Each registered contract needs either an artifact or its source"""
    logger.info("Checking build inputs...")
    logger.info(
        f"  solc {build_config.solc_version}, optimizer "
        f"{'on' if build_config.optimizer_enabled else 'off'} "
        f"({build_config.optimizer_runs} runs), viaIR {build_config.via_ir}"
    )

    ok = True
    for spec in CONTRACTS.values():
        artifact = spec.artifact_path(os.path.join(project_root, build_config.artifacts_dir))
        source = os.path.join(project_root, spec.source)

        if os.path.exists(artifact):
            logger.success(f"  ✓ {spec.qualified_name}: artifact present")
        elif os.path.exists(source):
            logger.info(f"  {spec.qualified_name}: will compile from source")
        else:
            logger.error(f"  ✗ {spec.qualified_name}: neither artifact nor source found")
            ok = False

    return ok


def main(
    networks_config: str = DEFAULT_CONFIG_PATH,
    build_config_path: str = DEFAULT_BUILD_CONFIG_PATH,
    web3_factory: Optional[Callable] = None
) -> int:
    """Run all checks"""
    logger.info("=" * 70)
    logger.info("Deployment Network Check")
    logger.info("=" * 70)

    store = NetworkConfigStore.from_file(networks_config)
    build_config = (
        BuildConfig.from_file(build_config_path)
        if os.path.exists(build_config_path) else BuildConfig()
    )

    checks = [
        ("Signing Credentials", lambda: check_credentials(store)),
        ("RPC Connections", lambda: check_rpc_connections(store, web3_factory or connect)),
        ("Build Inputs", lambda: check_build_inputs(build_config)),
    ]

    results = []
    for name, check_func in checks:
        logger.info("")
        results.append((name, check_func()))

    logger.info("")
    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    passed = sum(1 for _, result in results if result)
    logger.info(f"Total: {passed}/{len(results)} checks passed")

    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
