"""
Network Manager
Selects the target network and builds the AsyncWeb3 provider for deployment
"""

import os
import json
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlsplit
from web3 import AsyncWeb3
from loguru import logger
from dotenv import load_dotenv

from blockchain.chain_interface import DEFAULT_DEPLOY_SETTINGS

load_dotenv()

# Project override in the working directory, else the copy shipped with the package
PROJECT_CONFIG_PATH = Path('config') / 'network_config.json'
DEFAULT_CONFIG_PATH = Path(__file__).with_name('network_config.json')


def redact_rpc_url(rpc_url: str) -> str:
    """Scheme and host of an RPC URL; path and credentials may hold API keys"""
    parts = urlsplit(rpc_url)
    
    if not parts.scheme or not parts.hostname:
        return '<rpc url>'
    
    host = f"{parts.hostname}:{parts.port}" if parts.port else parts.hostname
    return f"{parts.scheme}://{host}"


def resolve_config_path() -> Path:
    """NETWORK_CONFIG_PATH, else config/network_config.json in the working directory, else bundled default"""
    env_path = os.getenv('NETWORK_CONFIG_PATH')
    
    if env_path:
        return Path(env_path)
    
    if PROJECT_CONFIG_PATH.is_file():
        return PROJECT_CONFIG_PATH
    
    return DEFAULT_CONFIG_PATH


class NetworkManager:
    """
    Network configuration for a single deployment run
    
    Network name: DEPLOY_NETWORK env var, else config default_network
    RPC URL: env var named by the network's rpc_url_env, else default_rpc_url
    Deployer key: DEPLOYER_PRIVATE_KEY (optional on local nodes)
    """
    
    def __init__(self, config_path: Optional[str] = None, network: Optional[str] = None):
        """
        Initialize Network Manager
        
        Args:
            config_path: Network config JSON (None = see resolve_config_path)
            network: Network name (None = DEPLOY_NETWORK or config default)
        """
        config_path = config_path or resolve_config_path()
        
        with open(config_path, 'r') as f:
            self.config = json.load(f)
        
        self.network_name = network or os.getenv('DEPLOY_NETWORK') or self.config['default_network']
        self.network = self._init_network(self.network_name)
        self.private_key = os.getenv('DEPLOYER_PRIVATE_KEY') or None
        
        self.w3 = None
        
        logger.info(f"Network: {self.network_name} ({redact_rpc_url(self.network['rpc_url'])})")
    
    def _init_network(self, network_name: str) -> Dict:
        """Resolve network entry with RPC URL and deployment settings"""
        networks = self.config.get('networks', {})
        
        if network_name not in networks:
            raise ValueError(
                f"Unknown network '{network_name}' (available: {', '.join(sorted(networks))})"
            )
        
        network_config = networks[network_name]
        
        rpc_url_env = network_config.get('rpc_url_env')
        rpc_url = (os.getenv(rpc_url_env) if rpc_url_env else None) or network_config.get('default_rpc_url')
        
        if not rpc_url:
            raise ValueError(f"{rpc_url_env} must be set for network '{network_name}'")
        
        settings = {
            key: network_config.get(key, default)
            for key, default in DEFAULT_DEPLOY_SETTINGS.items()
        }
        
        return {'rpc_url': rpc_url, **settings}
    
    @property
    def deploy_settings(self) -> Dict:
        """Settings passed to the chain interface"""
        return {key: self.network[key] for key in DEFAULT_DEPLOY_SETTINGS}
    
    def get_web3(self) -> AsyncWeb3:
        """Get (cached) AsyncWeb3 instance for the selected network"""
        if self.w3 is None:
            self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.network['rpc_url']))
        
        return self.w3
