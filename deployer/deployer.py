"""
Deployer
One-shot ProofStakeFinance deployment: resolve factory, submit, confirm, report
"""

from enum import Enum
from loguru import logger

from .result import DeploymentResult

CONTRACT_NAME = "ProofStakeFinance"
DEPLOYED_LABEL = f"{CONTRACT_NAME} contract deployed to"


def format_deployed_line(contract_address: str) -> str:
    """Address line printed on success"""
    return f"{DEPLOYED_LABEL}: {contract_address}"


class DeploymentState(Enum):
    START = "start"
    FACTORY_RESOLVED = "factory_resolved"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    DONE_SUCCESS = "done_success"
    DONE_FAILURE = "done_failure"


class Deployer:
    """
    Runs a single ProofStakeFinance deployment against a chain interface
    
    The chain interface provides get_contract_factory(name); the factory
    provides deploy(); the pending deployment provides deployed(), which
    resolves to a contract exposing .address.
    """
    
    def __init__(self, chain):
        """
        Initialize Deployer
        
        Args:
            chain: Chain interface used for lookup, submission and confirmation
        """
        self.chain = chain
        self.state = DeploymentState.START
    
    async def run(self) -> DeploymentResult:
        """
        Deploy one contract instance
        
        Returns:
            DeploymentResult with the contract address or the captured error
        """
        self.state = DeploymentState.START
        
        try:
            factory = await self.chain.get_contract_factory(CONTRACT_NAME)
            self.state = DeploymentState.FACTORY_RESOLVED
            
            pending = await factory.deploy()
            self.state = DeploymentState.SUBMITTED
            
            contract = await pending.deployed()
            self.state = DeploymentState.CONFIRMED
            
        except Exception as e:
            logger.debug(f"Deployment aborted after state {self.state.name}")
            self.state = DeploymentState.DONE_FAILURE
            return DeploymentResult.failure(e)
        
        logger.bind(report=True).info(format_deployed_line(contract.address))
        self.state = DeploymentState.DONE_SUCCESS
        
        return DeploymentResult.success(contract.address)
