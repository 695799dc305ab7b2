"""
Gas Calculator
Gas limit and pricing for contract-creation transactions
"""

from typing import Dict, Optional
from web3 import Web3
from loguru import logger

# Buffer over eth_estimateGas for the creation transaction
GAS_LIMIT_BUFFER = 1.2
DEFAULT_DEPLOY_GAS_LIMIT = 6_000_000


class GasCalculator:
    """
    Picks gas limit and price for a deployment

    A configured gas price override is sent as a legacy gasPrice; without
    one the transaction fields are left to web3's network-suggested defaults.
    """

    def __init__(self, w3: Web3):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
        """
        self.w3 = w3

    def estimate_gas_limit(self, constructor, sender: str) -> int:
        """
        Estimate gas for a constructor call with a 20% buffer

        Args:
            constructor: web3 ContractConstructor
            sender: Deployer address

        Returns:
            Gas limit
        """
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
            gas_limit = int(gas_estimate * GAS_LIMIT_BUFFER)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = DEFAULT_DEPLOY_GAS_LIMIT

        logger.info(f"Gas limit: {gas_limit}")
        return gas_limit

    def get_pricing(self, gas_price_override: Optional[int] = None) -> Dict[str, int]:
        """
        Transaction pricing fields

        Args:
            gas_price_override: Fixed gas price in wei, or None

        Returns:
            {'gasPrice': ...} for an override, {} for network-suggested pricing
        """
        if gas_price_override is not None:
            logger.info(f"Gas price override: {self.w3.from_wei(gas_price_override, 'gwei')} gwei")
            return {'gasPrice': int(gas_price_override)}

        logger.info("Using network-suggested gas pricing")
        return {}

    def get_reference_gas_price(self, pricing: Dict[str, int]) -> int:
        """Price used for cost estimates (override or current eth_gasPrice)"""
        if 'gasPrice' in pricing:
            return pricing['gasPrice']

        try:
            return self.w3.eth.gas_price
        except Exception as e:
            logger.warning(f"Could not read network gas price: {e}")
            return 0

    def estimate_deployment_cost(self, gas_limit: int, pricing: Dict[str, int]) -> int:
        """
        Upper bound on deployment cost

        Args:
            gas_limit: Gas limit of the creation transaction
            pricing: Result of get_pricing()

        Returns:
            Cost in wei
        """
        gas_price = self.get_reference_gas_price(pricing)
        cost_wei = gas_limit * gas_price

        logger.info(f"Estimated deployment cost: {self.w3.from_wei(cost_wei, 'ether')} ETH")
        return cost_wei
