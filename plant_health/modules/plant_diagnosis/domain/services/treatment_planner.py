"""
Treatment plan derivation.

Turns a diagnosis's recommendations into dated treatment steps: one step per
recommendation, one day apart, starting on the upload date.
"""

from datetime import date, timedelta
from typing import List, Sequence

from ..models.diagnosis import Recommendation
from ..models.plant import TreatmentDraft


class TreatmentPlanner:
    """Pure domain service; holds no state and cannot fail on valid input."""

    def derive(self, recommendations: Sequence[Recommendation], start_date: date) -> List[TreatmentDraft]:
        """
        Derive treatment drafts from recommendations.

        Recommendation order is kept as-is (``priority`` is ignored): the
        recommendation at index ``i`` becomes step ``i + 1`` scheduled on
        ``start_date + i`` days.

        Args:
            recommendations: Ordered recommendations from the diagnosis
            start_date: Date of step 1

        Returns:
            List of TreatmentDraft, empty when there are no recommendations
        """
        return [
            TreatmentDraft(
                step=index + 1,
                description=recommendation.action,
                scheduled_date=start_date + timedelta(days=index),
            )
            for index, recommendation in enumerate(recommendations)
        ]
