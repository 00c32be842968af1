"""
Blockchain Interaction Package
Handles artifact lookup, deployment transactions and confirmation
"""

from .chain_interface import ChainInterface, ContractFactory, PendingDeployment, DeployedContract
from .transaction_builder import TransactionBuilder
from .exceptions import DeploymentError, ArtifactNotFoundError, SubmissionError, ConfirmationError

__all__ = [
    'ChainInterface',
    'ContractFactory',
    'PendingDeployment',
    'DeployedContract',
    'TransactionBuilder',
    'DeploymentError',
    'ArtifactNotFoundError',
    'SubmissionError',
    'ConfirmationError'
]
