"""
Chain Interface
Resolves compiled contract artifacts and deploys them through web3.py
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from eth_account import Account
from loguru import logger

from .exceptions import (
    NODE_ERRORS,
    ArtifactNotFoundError,
    ConfirmationError,
    SubmissionError,
)
from .transaction_builder import TransactionBuilder


DEFAULT_DEPLOY_SETTINGS = {
    'confirmation_timeout': 120,
    'poll_interval': 0.1,
    'gas_buffer': 1.2,
    'default_gas_limit': 3_000_000,
    'chain_id': None
}


class DeployedContract:
    """Confirmed contract deployment"""
    
    def __init__(self, address: str, abi: List, tx_hash: str, receipt):
        self.address = address
        self.abi = abi
        self.tx_hash = tx_hash
        self.receipt = receipt


class PendingDeployment:
    """
    Submitted deployment transaction awaiting confirmation
    """
    
    def __init__(
        self,
        w3: AsyncWeb3,
        contract_name: str,
        abi: List,
        tx_hash: str,
        confirmation_timeout: float = 120,
        poll_interval: float = 0.1
    ):
        self.w3 = w3
        self.contract_name = contract_name
        self.abi = abi
        self.tx_hash = tx_hash
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self._deployed = None
    
    async def deployed(self) -> DeployedContract:
        """
        Wait until the deployment is mined
        
        Returns:
            DeployedContract with its on-chain address
            
        Raises:
            ConfirmationError: timeout, reverted deployment or missing address
        """
        if self._deployed is not None:
            return self._deployed
        
        logger.info("Waiting for confirmation...")
        
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self.confirmation_timeout,
                poll_latency=self.poll_interval
            )
        except TimeExhausted as e:
            raise ConfirmationError(
                f"{self.contract_name} deployment {self.tx_hash} not confirmed "
                f"within {self.confirmation_timeout}s",
                self.tx_hash
            ) from e
        except NODE_ERRORS as e:
            raise ConfirmationError(
                f"Error waiting for {self.contract_name} deployment {self.tx_hash}: {e}",
                self.tx_hash
            ) from e
        
        if receipt.get('status') != 1:
            raise ConfirmationError(
                f"{self.contract_name} deployment {self.tx_hash} reverted",
                self.tx_hash
            )
        
        contract_address = receipt.get('contractAddress')
        
        if not contract_address:
            raise ConfirmationError(
                f"Receipt for {self.tx_hash} has no contract address",
                self.tx_hash
            )
        
        logger.success(f"{self.contract_name} confirmed in block {receipt.get('blockNumber')}")
        logger.debug(f"Gas used: {receipt.get('gasUsed')}")
        
        self._deployed = DeployedContract(contract_address, self.abi, self.tx_hash, receipt)
        return self._deployed


class ContractFactory:
    """
    Deploys new instances of one compiled contract artifact
    """
    
    def __init__(
        self,
        w3: AsyncWeb3,
        artifact: Dict,
        private_key: Optional[str] = None,
        settings: Optional[Dict] = None
    ):
        """
        Initialize Contract Factory
        
        Args:
            w3: AsyncWeb3 instance
            artifact: Compiled artifact (contractName, abi, bytecode)
            private_key: Deployer key (None = first node-managed account)
            settings: Deployment settings (see DEFAULT_DEPLOY_SETTINGS)
        """
        self.w3 = w3
        self.artifact = artifact
        self.contract_name = artifact['contractName']
        self.abi = artifact['abi']
        self.bytecode = artifact['bytecode']
        self.private_key = private_key
        self.settings = {**DEFAULT_DEPLOY_SETTINGS, **(settings or {})}
        
        self.tx_builder = TransactionBuilder(
            w3,
            gas_buffer=self.settings['gas_buffer'],
            default_gas_limit=self.settings['default_gas_limit'],
            expected_chain_id=self.settings['chain_id']
        )
    
    async def deploy(self) -> PendingDeployment:
        """
        Submit the deployment transaction (no constructor arguments)
        
        Returns:
            PendingDeployment for the submitted transaction
            
        Raises:
            SubmissionError: account, build, signing or send failure
        """
        try:
            sender, account = await self._resolve_sender()
            logger.info(f"Deploying {self.contract_name} from: {sender}")
            
            Contract = self.w3.eth.contract(abi=self.abi, bytecode=self.bytecode)
            transaction = await self.tx_builder.build_deployment_tx(Contract.constructor(), sender)
            
            if account is not None:
                logger.info("Signing transaction...")
                signed_tx = account.sign_transaction(transaction)
                tx_hash = await self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            else:
                tx_hash = await self.w3.eth.send_transaction(transaction)
                
        except NODE_ERRORS as e:
            raise SubmissionError(f"Failed to submit {self.contract_name} deployment: {e}") from e
        
        tx_hash = AsyncWeb3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hash}")
        
        return PendingDeployment(
            self.w3,
            self.contract_name,
            self.abi,
            tx_hash,
            confirmation_timeout=self.settings['confirmation_timeout'],
            poll_interval=self.settings['poll_interval']
        )
    
    async def _resolve_sender(self) -> Tuple[str, Optional[object]]:
        """
        Resolve deployer address and local signing account
        
        Returns:
            (address, account) - account is None for node-managed accounts
        """
        if self.private_key:
            account = Account.from_key(self.private_key)
            return account.address, account
        
        node_accounts = await self.w3.eth.accounts
        
        if not node_accounts:
            raise SubmissionError(
                "No deployer account: set DEPLOYER_PRIVATE_KEY or use a node with unlocked accounts"
            )
        
        return node_accounts[0], None


class ChainInterface:
    """
    Entry point to the chain: artifact lookup and contract factories
    """
    
    def __init__(
        self,
        w3: AsyncWeb3,
        artifacts_dir: Union[str, Path] = 'artifacts',
        private_key: Optional[str] = None,
        settings: Optional[Dict] = None
    ):
        """
        Initialize Chain Interface
        
        Args:
            w3: AsyncWeb3 instance
            artifacts_dir: Root of compiled artifacts (Hardhat layout)
            private_key: Deployer key (None = first node-managed account)
            settings: Deployment settings (see DEFAULT_DEPLOY_SETTINGS)
        """
        self.w3 = w3
        self.artifacts_dir = Path(artifacts_dir)
        self.private_key = private_key
        self.settings = settings or {}
    
    async def get_contract_factory(self, name: str) -> ContractFactory:
        """
        Get factory for a compiled contract
        
        Args:
            name: Contract name or fully qualified name (path/File.sol:Name)
            
        Returns:
            ContractFactory for the artifact
            
        Raises:
            ArtifactNotFoundError: artifact missing, ambiguous or not deployable
        """
        artifact = self.load_artifact(name)
        return ContractFactory(self.w3, artifact, self.private_key, self.settings)
    
    def load_artifact(self, name: str) -> Dict:
        """Load and validate artifact JSON for name"""
        artifact_path = self._find_artifact_path(name)
        
        try:
            with open(artifact_path, 'r') as f:
                artifact = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFoundError(name, f"unreadable artifact {artifact_path}: {e}") from e
        
        missing = [key for key in ('abi', 'bytecode') if key not in artifact]
        if missing:
            raise ArtifactNotFoundError(name, f"artifact {artifact_path} missing {', '.join(missing)}")
        
        if artifact['bytecode'] in ('', '0x'):
            raise ArtifactNotFoundError(name, "abstract contract or interface cannot be deployed")
        
        artifact.setdefault('contractName', name.rsplit(':', 1)[-1])
        
        logger.debug(f"Loaded artifact {artifact_path}")
        return artifact
    
    def _find_artifact_path(self, name: str) -> Path:
        """
        Resolve artifact file for a contract name
        
        Bare names must match exactly one artifact; fully qualified
        names map straight to artifacts/<source>/<Name>.json.
        """
        if ':' in name:
            source_name, contract_name = name.rsplit(':', 1)
            artifact_path = self.artifacts_dir / source_name / f"{contract_name}.json"
            
            if not artifact_path.is_file():
                raise ArtifactNotFoundError(name)
            
            return artifact_path
        
        if not self.artifacts_dir.is_dir():
            raise ArtifactNotFoundError(
                name,
                f"artifacts directory {self.artifacts_dir} not found (compile contracts first)"
            )
        
        candidates = sorted(
            path for path in self.artifacts_dir.rglob(f"{name}.json")
            if 'build-info' not in path.relative_to(self.artifacts_dir).parts
        )
        
        if not candidates:
            raise ArtifactNotFoundError(name)
        
        if len(candidates) > 1:
            qualified = ', '.join(self._qualified_name(path) for path in candidates)
            raise ArtifactNotFoundError(
                name,
                f"multiple artifacts found, use a fully qualified name: {qualified}"
            )
        
        return candidates[0]
    
    def _qualified_name(self, artifact_path: Path) -> str:
        """Fully qualified name (source:Contract) for an artifact file"""
        source_name = artifact_path.parent.relative_to(self.artifacts_dir).as_posix()
        return f"{source_name}:{artifact_path.stem}"
    
    async def close(self):
        """Close the provider session"""
        try:
            await self.w3.provider.disconnect()
        except NODE_ERRORS as e:
            logger.warning(f"Error closing provider: {e}")
