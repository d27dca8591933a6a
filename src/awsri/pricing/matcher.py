"""
Offer matching.

Selects the one reservation offer, the per-dimension savings plan rates or
the single instance rate that correspond to a request, out of the candidate
lists returned by the AWS APIs.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..core.exceptions import NoPricingDataError, OfferNotFoundError
from ..core.regions import region_from_properties
from .classifier import DimensionClassifier, MagnitudeClassifier, SubstringClassifier
from .models import (
    Architecture, CommitmentPlanRate, Dimension, OfferTarget,
    ReservationOffer, SavingsPlanRateCandidate,
)
from .parser import PriceDocument, product_attributes

logger = logging.getLogger(__name__)

REQUIRED_DIMENSIONS = (Dimension.CPU, Dimension.MEMORY)


class OfferMatcher:
    """Reconciles candidate offers against the requested attributes"""

    def __init__(self,
                 classifier: Optional[DimensionClassifier] = None,
                 magnitude: Optional[MagnitudeClassifier] = None):
        self.classifier = classifier or SubstringClassifier()
        self.magnitude = magnitude or MagnitudeClassifier()

    # -- reservations -------------------------------------------------------

    def select_reservation_offer(self, offers: Sequence[ReservationOffer],
                                 target: OfferTarget) -> ReservationOffer:
        """Pick the offer for a (duration, product, deployment) target.

        Duration must match exactly. Among those, the first offer whose
        product description and Multi-AZ flag match wins; otherwise the first
        offer with the right duration is used.
        """
        same_duration = [o for o in offers if o.duration_seconds == target.duration_seconds]
        if not same_duration:
            raise OfferNotFoundError(
                Dimension.RESERVATION.value,
                f"No offering with a {target.duration_years} year duration "
                f"among {len(offers)} candidates"
            )

        for offer in same_duration:
            if self._attributes_match(offer, target):
                return offer

        fallback = same_duration[0]
        logger.warning(
            f"No offering matches {target.product_description} "
            f"(multi_az={target.multi_az}); using {fallback.offering_id or 'first candidate'} "
            f"({fallback.product_description}, multi_az={fallback.multi_az})",
            extra={'confidence': 'low'}
        )
        return fallback

    @staticmethod
    def _attributes_match(offer: ReservationOffer, target: OfferTarget) -> bool:
        if offer.product_description.lower() != target.product_description.lower():
            return False
        if target.multi_az is not None and offer.multi_az is not None:
            return bool(offer.multi_az) == bool(target.multi_az)
        return True

    # -- commitment plans ---------------------------------------------------

    def _in_scope(self, candidate: SavingsPlanRateCandidate,
                  duration_seconds: int, region: Optional[str]) -> bool:
        if candidate.duration_seconds is not None and candidate.duration_seconds != duration_seconds:
            return False
        if region:
            candidate_region = region_from_properties(candidate.properties)
            if candidate_region and candidate_region != region:
                return False
        return candidate.rate is not None

    def resolve_dimension_rates(self, candidates: Sequence[SavingsPlanRateCandidate],
                                duration_seconds: int,
                                region: Optional[str] = None,
                                architecture: Optional[Architecture] = None
                                ) -> Dict[Dimension, CommitmentPlanRate]:
        """Resolve one CPU and one memory rate out of savings plan candidates.

        Candidates are first filtered on duration and region. Each remaining
        usage-type label is then classified; the first rate found for a
        dimension wins. Hourly candidates whose labels say nothing about
        the dimension are classified by rate magnitude, flagged low-confidence.
        """
        scoped = [c for c in candidates if self._in_scope(c, duration_seconds, region)]
        resolved: Dict[Dimension, CommitmentPlanRate] = {}
        unclassified: List[SavingsPlanRateCandidate] = []

        for candidate in scoped:
            labels = candidate.labels
            eligible = [label for label in labels if self.classifier.is_eligible(label, architecture)]
            if labels and not eligible:
                continue

            classified = False
            for label in eligible:
                dimension = self.classifier.classify(label)
                if dimension is Dimension.UNKNOWN:
                    continue
                classified = True
                if dimension not in resolved:
                    resolved[dimension] = CommitmentPlanRate(dimension, candidate.rate, label)
            if not classified and candidate.is_hourly:
                unclassified.append(candidate)

        missing = [d for d in REQUIRED_DIMENSIONS if d not in resolved]
        if missing and unclassified:
            for candidate in unclassified:
                dimension = self.magnitude.classify(candidate.rate)
                if dimension in missing and dimension not in resolved:
                    resolved[dimension] = CommitmentPlanRate(
                        dimension, candidate.rate, candidate.usage_type, low_confidence=True
                    )
                    logger.warning(
                        f"Assuming {dimension.value} rate {candidate.rate} from its magnitude "
                        f"(usage type {candidate.usage_type or 'unknown'})",
                        extra={'dimension': dimension.value, 'confidence': 'low'}
                    )

        for dimension in REQUIRED_DIMENSIONS:
            if dimension not in resolved:
                raise OfferNotFoundError(
                    dimension.value,
                    f"{dimension.value} savings plan rate not found "
                    f"among {len(candidates)} candidates"
                )
        return resolved

    def select_instance_rate(self, candidates: Sequence[SavingsPlanRateCandidate],
                             duration_seconds: int,
                             region: Optional[str],
                             instance_type: str) -> CommitmentPlanRate:
        """Pick the single savings plan rate of one instance type"""
        for candidate in candidates:
            if not self._in_scope(candidate, duration_seconds, region):
                continue
            candidate_type = candidate.get_property('instanceType')
            if candidate_type and candidate_type != instance_type:
                continue
            if not all(self.classifier.is_eligible(label, None) for label in candidate.labels):
                continue
            return CommitmentPlanRate(Dimension.INSTANCE, candidate.rate, candidate.usage_type)

        raise OfferNotFoundError(
            Dimension.INSTANCE.value,
            f"Savings Plan rate not found for instance type {instance_type}"
        )

    # -- on-demand documents ------------------------------------------------

    def select_document_by_architecture(self, documents: Sequence[PriceDocument],
                                        architecture: Architecture) -> PriceDocument:
        """Pick the price document matching a processor architecture.

        The processorArchitecture attribute is often empty, so the usagetype
        attribute (``APN1-Fargate-ARM-vCPU-Hours:perCPU``) is checked as well.
        Falls back to the first document.
        """
        if not documents:
            raise NoPricingDataError("No price documents to choose from")

        for document in documents:
            attributes = product_attributes(document)
            arch = (attributes.get('processorArchitecture')
                    or attributes.get('ProcessorArchitecture')
                    or attributes.get('processor')
                    or '')
            usage_type = str(attributes.get('usagetype', '')).upper()
            is_arm = 'ARM' in usage_type or arch.upper() == 'ARM'

            if architecture == Architecture.ARM and is_arm:
                return document
            if architecture == Architecture.LINUX and not is_arm and arch in ('', 'x86_64'):
                return document

        logger.warning(
            f"No price document matches architecture {architecture.value}; using the first of {len(documents)}",
            extra={'confidence': 'low'}
        )
        return documents[0]
