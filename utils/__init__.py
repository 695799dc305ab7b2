"""
Utilities Package
Gas pricing and logging helpers shared by the deployment scripts
"""

from .gas_calculator import GasCalculator
from .logging_config import setup_logging, mask_secrets

__all__ = [
    'GasCalculator',
    'setup_logging',
    'mask_secrets'
]
