"""
Deployment Exceptions
Error taxonomy for the chain interface (artifact, submission, confirmation)
"""

import asyncio
from typing import Optional

import aiohttp
from web3.exceptions import Web3Exception


class DeploymentError(Exception):
    """Base class for every failure raised by the chain interface"""
    pass


class ArtifactNotFoundError(DeploymentError):
    """
    Raised when a contract artifact cannot be resolved

    Examples:
        - No compiled artifact with the requested name
        - Same contract name compiled from several sources
        - Artifact JSON unreadable or missing abi/bytecode
        - Abstract contract or interface (empty bytecode)
    """

    def __init__(self, name: str, reason: str = "artifact not found"):
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}")


class SubmissionError(DeploymentError):
    """Raised when the deployment transaction could not be built, signed or sent"""
    pass


class ConfirmationError(DeploymentError):
    """
    Raised when a submitted deployment is not confirmed

    Covers receipt timeouts, reverted transactions and receipts
    without a contract address.
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


# Errors surfaced by web3 providers, the HTTP transport and local signing
NODE_ERRORS = (
    Web3Exception,
    ValueError,
    OSError,
    asyncio.TimeoutError,
    aiohttp.ClientError,
)
