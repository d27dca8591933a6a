"""
Price List document parsing.

The Price List API returns each product as a JSON string shaped like::

    terms -> OnDemand -> {offer term code} -> priceDimensions
          -> {rate code} -> pricePerUnit -> USD

For a filtered query there is one term and one dimension, so only the first
entry at each level is consulted.
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

from ..core.exceptions import NoPricingDataError, PriceExtractionError

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600

PriceDocument = Union[str, bytes, Mapping[str, Any]]


def load_document(document: PriceDocument) -> Dict[str, Any]:
    """Decode a raw PriceList entry into a dict"""
    if isinstance(document, Mapping):
        return dict(document)
    try:
        data = json.loads(document)
    except (TypeError, ValueError) as e:
        raise PriceExtractionError(f"Price document is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise PriceExtractionError(f"Price document is a {type(data).__name__}, expected an object")
    return data


def _first_entry(section: Any, what: str) -> Any:
    if section is None:
        raise NoPricingDataError(f"No {what} in price document")
    if not isinstance(section, Mapping):
        raise PriceExtractionError(f"Unexpected {what} section: {type(section).__name__}")
    if not section:
        raise NoPricingDataError(f"No {what} in price document")
    return next(iter(section.values()))


def is_per_second(unit: str) -> bool:
    unit = (unit or "").lower()
    return "second" in unit or "sec" in unit


def extract_hourly_rate(document: PriceDocument) -> float:
    """Return the on-demand USD rate of a price document, per hour.

    Raises NoPricingDataError when a level of the document is empty or the
    USD amount is missing, and PriceExtractionError when the document has an
    unexpected shape or the amount cannot be parsed.
    """
    data = load_document(document)

    terms = data.get('terms')
    if not isinstance(terms, Mapping):
        raise NoPricingDataError("No terms in price document")

    term = _first_entry(terms.get('OnDemand'), "OnDemand terms")
    if not isinstance(term, Mapping):
        raise PriceExtractionError("Malformed OnDemand term")

    dimension = _first_entry(term.get('priceDimensions'), "price dimensions")
    if not isinstance(dimension, Mapping):
        raise PriceExtractionError("Malformed price dimension")

    price_per_unit = dimension.get('pricePerUnit')
    if not isinstance(price_per_unit, Mapping) or price_per_unit.get('USD') is None:
        raise NoPricingDataError("No USD price in price document")

    raw_price = price_per_unit['USD']
    try:
        price = float(raw_price)
    except (TypeError, ValueError):
        raise PriceExtractionError(f"Invalid USD price: {raw_price!r}")

    unit = dimension.get('unit', '')
    if is_per_second(unit):
        price = price * SECONDS_PER_HOUR

    logger.debug(f"Extracted hourly rate {price} (unit={unit!r})")
    return price


def product_attributes(document: PriceDocument) -> Dict[str, Any]:
    """Return product.attributes of a price document, or an empty dict"""
    data = load_document(document)
    product = data.get('product') or {}
    attributes = product.get('attributes') if isinstance(product, Mapping) else None
    return dict(attributes) if isinstance(attributes, Mapping) else {}
