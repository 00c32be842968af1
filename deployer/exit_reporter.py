"""
Exit Reporter
Maps a deployment result to the process exit code
"""

import sys
from typing import Any, Callable
from loguru import logger

from .result import DeploymentResult

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class ExitReporter:
    """
    Reports the outcome and terminates through an injectable exit function
    """
    
    def __init__(self, exit_fn: Callable[[int], Any] = sys.exit):
        """
        Initialize Exit Reporter
        
        Args:
            exit_fn: Called with the exit code (sys.exit outside of tests)
        """
        self.exit_fn = exit_fn
    
    @staticmethod
    def exit_code(result: DeploymentResult) -> int:
        """Exit code for result: 0 on success, 1 for any failure"""
        return EXIT_SUCCESS if result.ok else EXIT_FAILURE
    
    def report(self, result: DeploymentResult):
        """
        Log failure details and exit
        
        Args:
            result: Outcome of the deployment run
        """
        if not result.ok:
            logger.opt(exception=result.error).error(f"Deployment failed: {result.error!r}")
        
        return self.exit_fn(self.exit_code(result))
