"""
ProofStakeFinance Deployment Script
Deploys one ProofStakeFinance contract; exits 0 on success, 1 on failure
"""

import asyncio
import os
import sys
from typing import Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain import ChainInterface
from deployer import Deployer, DeploymentResult, ExitReporter
from utils import NetworkManager

load_dotenv()

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def _is_report(record) -> bool:
    return record["extra"].get("report", False)


def configure_logging():
    """Address line to stdout, everything else to stderr"""
    logger.remove()
    logger.add(
        sys.stdout,
        format="{message}",
        level="INFO",
        filter=_is_report
    )
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=os.getenv('LOG_LEVEL', 'INFO'),
        filter=lambda record: not _is_report(record)
    )


def build_chain_interface() -> ChainInterface:
    """Chain interface for the configured network"""
    network = NetworkManager()
    
    return ChainInterface(
        network.get_web3(),
        artifacts_dir=os.getenv('ARTIFACTS_DIR', 'artifacts'),
        private_key=network.private_key,
        settings=network.deploy_settings
    )


async def main(chain: Optional[ChainInterface] = None) -> DeploymentResult:
    """Run the deployment; setup errors become failure results"""
    try:
        if chain is None:
            chain = build_chain_interface()
    except Exception as e:
        return DeploymentResult.failure(e)
    
    try:
        return await Deployer(chain).run()
    finally:
        try:
            await chain.close()
        except Exception as e:
            logger.warning(f"Error closing chain interface: {e}")


def run(chain: Optional[ChainInterface] = None, exit_reporter: Optional[ExitReporter] = None):
    """Script entry point"""
    configure_logging()
    
    reporter = exit_reporter or ExitReporter()
    result = asyncio.run(main(chain))
    
    return reporter.report(result)


if __name__ == "__main__":
    run()
