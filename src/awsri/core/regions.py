"""Region code <-> Price List location name translation"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .exceptions import ConfigurationError

REGION_TO_LOCATION: Mapping[str, str] = MappingProxyType({
    "af-south-1": "Africa (Cape Town)",
    "ap-east-1": "Asia Pacific (Hong Kong)",
    "ap-northeast-1": "Asia Pacific (Tokyo)",
    "ap-northeast-2": "Asia Pacific (Seoul)",
    "ap-northeast-3": "Asia Pacific (Osaka)",
    "ap-south-1": "Asia Pacific (Mumbai)",
    "ap-southeast-1": "Asia Pacific (Singapore)",
    "ap-southeast-2": "Asia Pacific (Sydney)",
    "ap-southeast-3": "Asia Pacific (Jakarta)",
    "ap-southeast-4": "Asia Pacific (Melbourne)",
    "ca-central-1": "Canada (Central)",
    "cn-north-1": "China (Beijing)",
    "cn-northwest-1": "China (Ningxia)",
    "eu-central-1": "EU (Frankfurt)",
    "eu-central-2": "EU (Zurich)",
    "eu-north-1": "EU (Stockholm)",
    "eu-south-1": "EU (Milan)",
    "eu-south-2": "EU (Spain)",
    "eu-west-1": "EU (Ireland)",
    "eu-west-2": "EU (London)",
    "eu-west-3": "EU (Paris)",
    "il-central-1": "Israel (Tel Aviv)",
    "me-central-1": "Middle East (UAE)",
    "me-south-1": "Middle East (Bahrain)",
    "sa-east-1": "South America (São Paulo)",
    "us-east-1": "US East (N. Virginia)",
    "us-east-2": "US East (Ohio)",
    "us-west-1": "US West (N. California)",
    "us-west-2": "US West (Oregon)",
})

LOCATION_TO_REGION: Mapping[str, str] = MappingProxyType(
    {location: region for region, location in REGION_TO_LOCATION.items()}
)


def region_to_location(region: str) -> str:
    """Return the Price List location name for a region code.

    An unmapped region cannot be used to build a catalog filter, so it is
    reported as a configuration error instead of being passed through.
    """
    try:
        return REGION_TO_LOCATION[region]
    except KeyError:
        raise ConfigurationError(f"Unknown AWS region: {region}")


def location_to_region(location: str) -> str:
    """Return the region code for a location name, or the input unchanged"""
    return LOCATION_TO_REGION.get(location, location)


def region_from_properties(properties: Iterable[Mapping[str, str]]) -> Optional[str]:
    """Resolve the region of a savings plan rate from its name/value properties.

    ``regionCode`` is used as-is; ``location`` is translated back to a code.
    Returns None when neither property is present.
    """
    for prop in properties or []:
        name = prop.get('name') or prop.get('Name')
        value = prop.get('value') or prop.get('Value')
        if not value:
            continue
        if name == 'regionCode':
            return value
        if name == 'location':
            return location_to_region(value)
    return None
