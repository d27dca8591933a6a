from .client import AWSClient, PRICING_REGION

__all__ = ['AWSClient', 'PRICING_REGION']
