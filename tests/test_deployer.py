"""
Unit Tests for the Deployer
"""

import pytest
from unittest.mock import Mock, AsyncMock

from blockchain.exceptions import ArtifactNotFoundError, SubmissionError, ConfirmationError
from deployer import Deployer, DeploymentState, CONTRACT_NAME, format_deployed_line


ADDRESS = '0xAbC1230000000000000000000000000000000001'


def make_chain(address=ADDRESS):
    """Mock chain interface resolving to a deployed contract at address"""
    pending = Mock()
    pending.deployed = AsyncMock(return_value=Mock(address=address))
    
    factory = Mock()
    factory.deploy = AsyncMock(return_value=pending)
    
    chain = Mock()
    chain.get_contract_factory = AsyncMock(return_value=factory)
    
    return chain, factory, pending


def report_lines(records):
    return [r['message'] for r in records if r['extra'].get('report')]


class TestDeployerSuccess:
    """Successful deployments"""
    
    @pytest.mark.asyncio
    async def test_run_returns_address(self, log_records):
        """Test deployed address is returned and reported once"""
        chain, factory, pending = make_chain()
        deployer = Deployer(chain)
        
        result = await deployer.run()
        
        assert result.ok
        assert result.contract_address == ADDRESS
        assert result.error is None
        assert deployer.state == DeploymentState.DONE_SUCCESS
        assert report_lines(log_records) == [f"ProofStakeFinance contract deployed to: {ADDRESS}"]
    
    @pytest.mark.asyncio
    async def test_requests_fixed_artifact(self):
        """Test factory lookup uses ProofStakeFinance and deploy has no arguments"""
        chain, factory, pending = make_chain()
        
        await Deployer(chain).run()
        
        chain.get_contract_factory.assert_awaited_once_with(CONTRACT_NAME)
        factory.deploy.assert_awaited_once_with()
        pending.deployed.assert_awaited_once_with()
    
    def test_format_deployed_line(self):
        """Test label format"""
        assert format_deployed_line('0xAbC123') == 'ProofStakeFinance contract deployed to: 0xAbC123'


class TestDeployerFailure:
    """Failures at each step"""
    
    @pytest.mark.asyncio
    async def test_artifact_not_found(self, log_records):
        """Test factory lookup failure stops before submission"""
        chain, factory, pending = make_chain()
        error = ArtifactNotFoundError(CONTRACT_NAME)
        chain.get_contract_factory.side_effect = error
        deployer = Deployer(chain)
        
        result = await deployer.run()
        
        assert not result.ok
        assert result.error is error
        assert result.contract_address is None
        assert deployer.state == DeploymentState.DONE_FAILURE
        factory.deploy.assert_not_awaited()
        assert report_lines(log_records) == []
    
    @pytest.mark.asyncio
    async def test_submission_failure(self, log_records):
        """Test submission failure after the factory was resolved"""
        chain, factory, pending = make_chain()
        factory.deploy.side_effect = SubmissionError("request timed out")
        
        result = await Deployer(chain).run()
        
        assert isinstance(result.error, SubmissionError)
        pending.deployed.assert_not_awaited()
        assert report_lines(log_records) == []
        assert any('FACTORY_RESOLVED' in r['message'] for r in log_records)
    
    @pytest.mark.asyncio
    async def test_confirmation_failure(self, log_records):
        """Test confirmation failure after submission"""
        chain, factory, pending = make_chain()
        pending.deployed.side_effect = ConfirmationError("reverted", '0x01')
        deployer = Deployer(chain)
        
        result = await deployer.run()
        
        assert isinstance(result.error, ConfirmationError)
        assert deployer.state == DeploymentState.DONE_FAILURE
        assert report_lines(log_records) == []
        assert any('SUBMITTED' in r['message'] for r in log_records)
    
    @pytest.mark.asyncio
    async def test_unexpected_error_is_captured(self):
        """Test errors outside the taxonomy are captured too"""
        chain, factory, pending = make_chain()
        pending.deployed.side_effect = RuntimeError("boom")
        
        result = await Deployer(chain).run()
        
        assert isinstance(result.error, RuntimeError)


class TestDeployerRepeatability:
    """Independent runs"""
    
    @pytest.mark.asyncio
    async def test_failure_then_success(self):
        """Test a failed run does not affect the next one"""
        chain, factory, pending = make_chain()
        factory.deploy.side_effect = [SubmissionError("nonce too low"), pending]
        deployer = Deployer(chain)
        
        first = await deployer.run()
        assert not first.ok
        
        second = await deployer.run()
        assert second.ok
        assert second.contract_address == ADDRESS
        assert deployer.state == DeploymentState.DONE_SUCCESS
        assert factory.deploy.await_count == 2
    
    @pytest.mark.asyncio
    async def test_two_deployments(self, log_records):
        """Test each run performs its own deployment"""
        chain, factory, pending = make_chain()
        other = '0x0000000000000000000000000000000000000002'
        pending.deployed.side_effect = [Mock(address=ADDRESS), Mock(address=other)]
        deployer = Deployer(chain)
        
        results = [await deployer.run(), await deployer.run()]
        
        assert [r.contract_address for r in results] == [ADDRESS, other]
        assert chain.get_contract_factory.await_count == 2
        assert len(report_lines(log_records)) == 2
