from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class CloudProvider(Enum):
    AWS = "aws"


@dataclass
class CloudCredentials:
    """Named profile and default region a provider session is built from"""
    provider: CloudProvider
    profile: Optional[str] = None
    region: Optional[str] = None


class BaseCloudProvider(ABC):
    """Narrow interface the pricing services depend on.

    A provider builds a session from credentials, hands out region-bound
    service clients, and answers cost catalog queries with raw price
    documents. Offer and inventory queries are provider specific.
    """

    def __init__(self, credentials: CloudCredentials):
        self.credentials = credentials
        self._authenticated = False

    @abstractmethod
    def authenticate(self) -> bool:
        pass

    @abstractmethod
    def get_client(self, service: str, region: Optional[str] = None) -> Any:
        pass

    @abstractmethod
    def get_products(self, service_code: str, filters: List[Dict[str, str]],
                     max_results: Optional[int] = None) -> List[str]:
        pass

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def get_provider_info(self) -> Dict[str, Any]:
        """Describe the session for debug output"""
        return {
            "provider": self.credentials.provider.value,
            "profile": self.credentials.profile or "default",
            "region": self.credentials.region,
            "authenticated": self._authenticated,
        }
