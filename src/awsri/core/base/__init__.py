from .cloud_provider import BaseCloudProvider, CloudProvider, CloudCredentials

__all__ = [
    'BaseCloudProvider', 'CloudProvider', 'CloudCredentials',
]
