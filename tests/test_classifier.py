"""Tests for usage-type classification"""

import pytest

from awsri.pricing.classifier import MagnitudeClassifier, SubstringClassifier
from awsri.pricing.models import Architecture, Dimension


class TestSubstringClassifier:
    """Test SubstringClassifier"""

    @pytest.fixture
    def classifier(self):
        return SubstringClassifier()

    @pytest.mark.parametrize("label,expected", [
        ("APN1-Fargate-vCPU-Hours:perCPU", Dimension.CPU),
        ("APN1-Fargate-ARM-vCPU-Hours:perCPU", Dimension.CPU),
        ("APN1-Fargate-GB-Hours", Dimension.MEMORY),
        ("USE1-Fargate-Memory-Hours", Dimension.MEMORY),
        ("APN1-Fargate-EphemeralStorage-Hours", Dimension.UNKNOWN),
        ("", Dimension.UNKNOWN),
    ])
    def test_classify(self, classifier, label, expected):
        assert classifier.classify(label) is expected

    def test_windows_never_eligible(self, classifier):
        assert not classifier.is_eligible("APN1-Fargate-Windows-vCPU-Hours:perCPU", None)
        assert not classifier.is_eligible("APN1-Fargate-Windows-vCPU-Hours:perCPU", Architecture.LINUX)

    def test_arm_matches_exactly(self, classifier):
        """ARM labels only for ARM requests, never for x86 requests"""
        arm_label = "APN1-Fargate-ARM-GB-Hours"
        x86_label = "APN1-Fargate-GB-Hours"
        assert classifier.is_eligible(arm_label, Architecture.ARM)
        assert not classifier.is_eligible(x86_label, Architecture.ARM)
        assert classifier.is_eligible(x86_label, Architecture.LINUX)
        assert not classifier.is_eligible(arm_label, Architecture.LINUX)

    def test_no_architecture_accepts_both(self, classifier):
        assert classifier.is_eligible("APN1-Fargate-ARM-GB-Hours", None)
        assert classifier.is_eligible("APN1-Fargate-GB-Hours", None)


class TestMagnitudeClassifier:
    """Test MagnitudeClassifier"""

    def test_above_threshold_is_cpu(self):
        assert MagnitudeClassifier().classify(0.0403) is Dimension.CPU

    def test_below_threshold_is_memory(self):
        assert MagnitudeClassifier().classify(0.0044) is Dimension.MEMORY

    def test_threshold_itself_is_memory(self):
        assert MagnitudeClassifier().classify(0.01) is Dimension.MEMORY

    def test_custom_threshold(self):
        assert MagnitudeClassifier(threshold=0.1).classify(0.05) is Dimension.MEMORY
