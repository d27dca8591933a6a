"""
Usage-type classification for commitment plan rates.

Savings plan rates only say which resource they price through a free-text
usage type such as ``APN1-Fargate-ARM-vCPU-Hours:perCPU``. The rules live
behind a small strategy interface so call sites never match strings
themselves.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import Architecture, Dimension

# Below this hourly rate a rate is assumed to price memory (per GB), above it CPU
MAGNITUDE_THRESHOLD = 0.01


class DimensionClassifier(ABC):
    """Strategy that maps a raw usage-type label to a dimension"""

    @abstractmethod
    def classify(self, label: str) -> Dimension:
        """Return CPU, MEMORY or UNKNOWN for a label"""
        pass

    @abstractmethod
    def is_eligible(self, label: str, architecture: Optional[Architecture]) -> bool:
        """Return False when the label must be ignored for this request"""
        pass


class SubstringClassifier(DimensionClassifier):
    """Classifies labels by case-insensitive substring rules"""

    EXCLUDED = ('windows',)
    ARM_MARKER = 'arm'
    CPU_MARKERS = ('vcpu', 'cpu')
    MEMORY_MARKERS = ('gb', 'memory')

    def classify(self, label: str) -> Dimension:
        label = (label or '').lower()
        if any(marker in label for marker in self.CPU_MARKERS):
            return Dimension.CPU
        if any(marker in label for marker in self.MEMORY_MARKERS):
            return Dimension.MEMORY
        return Dimension.UNKNOWN

    def is_eligible(self, label: str, architecture: Optional[Architecture]) -> bool:
        label = (label or '').lower()
        if any(excluded in label for excluded in self.EXCLUDED):
            return False
        if architecture is None:
            return True
        # ARM requests need ARM labels and x86 requests must not get them
        has_arm = self.ARM_MARKER in label
        return has_arm == (architecture == Architecture.ARM)


class MagnitudeClassifier:
    """Last-resort classification of an hourly rate by its size"""

    def __init__(self, threshold: float = MAGNITUDE_THRESHOLD):
        self.threshold = threshold

    def classify(self, rate: float) -> Dimension:
        return Dimension.CPU if rate > self.threshold else Dimension.MEMORY
