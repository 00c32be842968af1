"""
Deployer Package
One-shot deployment orchestration, result type and exit-code mapping
"""

from .deployer import Deployer, DeploymentState, CONTRACT_NAME, DEPLOYED_LABEL, format_deployed_line
from .result import DeploymentResult
from .exit_reporter import ExitReporter, EXIT_SUCCESS, EXIT_FAILURE

__all__ = [
    'Deployer',
    'DeploymentState',
    'DeploymentResult',
    'ExitReporter',
    'CONTRACT_NAME',
    'DEPLOYED_LABEL',
    'EXIT_SUCCESS',
    'EXIT_FAILURE',
    'format_deployed_line'
]
