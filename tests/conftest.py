"""
Shared fixtures: fake AsyncWeb3 node, compiled artifacts and log capture
"""

import json
import pytest
from unittest.mock import Mock, AsyncMock
from loguru import logger


NODE_ACCOUNT = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DEPLOYED_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH_BYTES = bytes.fromhex('ab' * 32)
TX_HASH = '0x' + 'ab' * 32
BYTECODE = '0x608060405234801561001057600080fd5b50'


class FakeEth:
    """Async eth module of a local development node"""
    
    def __init__(self, accounts=None, chain_id=31337, base_fee=None, receipt=None):
        self._accounts = [NODE_ACCOUNT] if accounts is None else accounts
        self._chain_id = chain_id
        self._gas_price = 30_000_000_000
        self._max_priority_fee = 1_500_000_000
        
        self.constructor = Mock()
        self.constructor.estimate_gas = AsyncMock(return_value=100_000)
        self.constructor.build_transaction = AsyncMock(side_effect=lambda tx: {**tx, 'data': BYTECODE})
        self.contract = Mock(return_value=Mock(constructor=Mock(return_value=self.constructor)))
        
        block = {'number': 1} if base_fee is None else {'number': 1, 'baseFeePerGas': base_fee}
        self.get_block = AsyncMock(return_value=block)
        self.get_transaction_count = AsyncMock(return_value=7)
        self.send_transaction = AsyncMock(return_value=TX_HASH_BYTES)
        self.send_raw_transaction = AsyncMock(return_value=TX_HASH_BYTES)
        self.wait_for_transaction_receipt = AsyncMock(return_value=receipt or {
            'status': 1,
            'contractAddress': DEPLOYED_ADDRESS,
            'blockNumber': 2,
            'gasUsed': 95_000
        })
    
    @property
    async def accounts(self):
        return self._accounts
    
    @property
    async def chain_id(self):
        return self._chain_id
    
    @property
    async def gas_price(self):
        return self._gas_price
    
    @property
    async def max_priority_fee(self):
        return self._max_priority_fee


def make_w3(eth=None):
    """Mock AsyncWeb3 backed by FakeEth"""
    w3 = Mock()
    w3.eth = eth or FakeEth()
    w3.provider.disconnect = AsyncMock()
    return w3


def write_artifact(artifacts_dir, source_name, contract_name, bytecode=BYTECODE):
    """Write a Hardhat-style artifact and its debug file"""
    contract_dir = artifacts_dir / source_name
    contract_dir.mkdir(parents=True, exist_ok=True)
    
    artifact = {
        '_format': 'hh-sol-artifact-1',
        'contractName': contract_name,
        'sourceName': source_name,
        'abi': [{'inputs': [], 'stateMutability': 'nonpayable', 'type': 'constructor'}],
        'bytecode': bytecode,
        'deployedBytecode': bytecode
    }
    
    artifact_path = contract_dir / f"{contract_name}.json"
    artifact_path.write_text(json.dumps(artifact))
    (contract_dir / f"{contract_name}.dbg.json").write_text(json.dumps({'buildInfo': '../build-info/x.json'}))
    
    return artifact_path


@pytest.fixture
def w3():
    """Mock AsyncWeb3 instance"""
    return make_w3()


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts directory with a compiled ProofStakeFinance"""
    root = tmp_path / 'artifacts'
    write_artifact(root, 'contracts/ProofStakeFinance.sol', 'ProofStakeFinance')
    return root


@pytest.fixture
def log_records():
    """Loguru records emitted during the test"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
