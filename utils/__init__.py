"""
Utilities Package
Network selection and provider configuration
"""

from .network_manager import NetworkManager

__all__ = ['NetworkManager']
