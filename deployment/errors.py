"""
Deployment Errors
Failure kinds raised by the deployment workflow
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for every failure of a single deployment invocation"""


class UnknownNetwork(DeploymentError):
    """Network identifier is not registered in the configuration store"""

    def __init__(self, identifier: str, known: Optional[list] = None):
        self.identifier = identifier
        message = f"Unknown network: {identifier!r}"
        if known:
            message += f" (configured: {', '.join(sorted(known))})"
        super().__init__(message)


class InvalidConstructorArgument(DeploymentError):
    """Constructor argument failed validation before anything was sent"""


class SubmissionFailed(DeploymentError):
    """Node rejected the creation transaction, or it reverted on-chain"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class NetworkUnavailable(SubmissionFailed):
    """RPC endpoint could not be reached"""


class DeploymentTimeout(DeploymentError):
    """
    Receipt was not observed within the confirmation bound.

    The outcome is ambiguous: the transaction may still be mined. Re-query
    with ContractDeployer.check_deployment(network, tx_hash) instead of
    deploying again.
    """

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(
            f"No receipt for {tx_hash} after {timeout:g}s - "
            f"transaction may still confirm, re-query by hash"
        )


class CompilationFailed(DeploymentError):
    """External compiler failed; carries its message verbatim"""


class InvalidArtifact(CompilationFailed):
    """Compiled artifact is missing or does not match the contract spec"""
