"""Custom exceptions for awsri"""


class AwsriError(Exception):
    """Base exception for all awsri errors"""
    pass


class ConfigurationError(AwsriError):
    """Raised when credentials, region or configuration are missing or invalid"""
    pass


class InvalidParameterError(AwsriError):
    """Raised when a caller-supplied parameter is outside its valid set"""
    pass


class NoPricingDataError(AwsriError):
    """Raised when the price catalog returned no usable pricing data"""
    pass


class PriceExtractionError(AwsriError):
    """Raised when a price document has an unexpected shape"""
    pass


class OfferNotFoundError(AwsriError):
    """Raised when no candidate offer satisfies the requested attributes"""
    def __init__(self, dimension: str, message: str = ""):
        self.dimension = dimension
        super().__init__(message or f"No offer found for dimension: {dimension}")


class CalculationError(AwsriError):
    """Raised when a cost figure cannot be computed from its inputs"""
    pass


class ProviderError(AwsriError):
    """Base exception for provider-specific errors"""
    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class AWSError(ProviderError):
    """AWS-specific errors"""
    def __init__(self, message: str):
        super().__init__("AWS", message)
