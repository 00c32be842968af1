"""
Transaction Builder
Constructs contract deployment transactions (nonce, chain id, gas, fees)
"""

from typing import Dict, Optional
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError
from loguru import logger

from .exceptions import NODE_ERRORS, SubmissionError


class TransactionBuilder:
    """
    Builds deployment transactions for a contract constructor
    """
    
    def __init__(
        self,
        w3: AsyncWeb3,
        gas_buffer: float = 1.2,
        default_gas_limit: int = 3_000_000,
        expected_chain_id: Optional[int] = None
    ):
        """
        Initialize Transaction Builder
        
        Args:
            w3: AsyncWeb3 instance
            gas_buffer: Multiplier applied to the gas estimate
            default_gas_limit: Gas limit used when estimation fails
            expected_chain_id: Chain id the node must report (None = any)
        """
        self.w3 = w3
        self.gas_buffer = gas_buffer
        self.default_gas_limit = default_gas_limit
        self.expected_chain_id = expected_chain_id
    
    async def build_deployment_tx(self, constructor, sender: str) -> Dict:
        """
        Build transaction deploying a contract from sender
        
        Args:
            constructor: web3 contract constructor call (no arguments)
            sender: Deployer address
            
        Returns:
            Transaction dict ready to sign or send
        """
        chain_id = await self.w3.eth.chain_id
        
        if self.expected_chain_id is not None and chain_id != self.expected_chain_id:
            raise SubmissionError(
                f"Connected to chain {chain_id}, expected chain {self.expected_chain_id}"
            )
        
        nonce = await self.w3.eth.get_transaction_count(sender, 'pending')
        gas_limit = await self._estimate_gas(constructor, sender)
        fees = await self._get_fee_fields()
        
        logger.info(f"Gas limit: {gas_limit}")
        
        tx = await constructor.build_transaction({
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id,
            **fees
        })
        
        return tx
    
    async def _estimate_gas(self, constructor, sender: str) -> int:
        """
        Estimate deployment gas with buffer
        
        Transport errors fall back to the default limit; a reverting
        constructor raises SubmissionError instead of being sent.
        """
        try:
            gas_estimate = await constructor.estimate_gas({'from': sender})
            return int(gas_estimate * self.gas_buffer)
        except ContractLogicError as e:
            raise SubmissionError(f"Deployment would revert: {e}") from e
        except NODE_ERRORS as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit
    
    async def _get_fee_fields(self) -> Dict:
        """
        Get fee fields for the current network
        
        Returns:
            EIP-1559 fee fields when the latest block has a base fee,
            legacy gasPrice otherwise
        """
        block = await self.w3.eth.get_block('latest')
        base_fee = block.get('baseFeePerGas')
        
        if base_fee is None:
            gas_price = await self.w3.eth.gas_price
            logger.debug(f"Legacy gas price: {gas_price} wei")
            return {'gasPrice': gas_price}
        
        tip = await self.w3.eth.max_priority_fee
        logger.debug(f"Base fee: {base_fee} wei, tip: {tip} wei")
        
        return {
            'maxFeePerGas': base_fee * 2 + tip,
            'maxPriorityFeePerGas': tip
        }
