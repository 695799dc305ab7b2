"""
Deployment Package
Network configuration, contract artifacts and the deployment workflow
"""

from .errors import (
    DeploymentError,
    UnknownNetwork,
    InvalidConstructorArgument,
    SubmissionFailed,
    NetworkUnavailable,
    DeploymentTimeout,
    CompilationFailed,
    InvalidArtifact,
)
from .network_config import NetworkConfigStore, NetworkProfile, SigningCredential
from .build_config import BuildConfig
from .contract_registry import ContractRegistry, ContractSpec, ContractArtifact, PET_RACE
from .deployer import ContractDeployer, DeploymentResult, DeploymentStatus, DeploymentState

__all__ = [
    'DeploymentError',
    'UnknownNetwork',
    'InvalidConstructorArgument',
    'SubmissionFailed',
    'NetworkUnavailable',
    'DeploymentTimeout',
    'CompilationFailed',
    'InvalidArtifact',
    'NetworkConfigStore',
    'NetworkProfile',
    'SigningCredential',
    'BuildConfig',
    'ContractRegistry',
    'ContractSpec',
    'ContractArtifact',
    'PET_RACE',
    'ContractDeployer',
    'DeploymentResult',
    'DeploymentStatus',
    'DeploymentState',
]
