"""
readiness/base.py

Contract for readiness models that fold the four readiness signals
(data quality, field coverage, rule compliance, operational posture)
into one overall score.
"""

from abc import ABC, abstractmethod


class BaseReadinessModel(ABC):
    """Interface shared by readiness weighting strategies.

    A model receives already-normalized sub-scores and decides how much each
    signal counts toward e-invoicing readiness. Label thresholds live outside
    the model, so any implementation must keep its result on the same 0-100
    scale the labels are defined on.
    """

    @abstractmethod
    def combine(self, sub_scores: dict) -> int:
        """Fold readiness sub-scores into the overall score.

        Args:
            sub_scores: Mapping with the keys data, coverage, rules and
                posture, each an integer in [0, 100]. A missing key means
                the signal contributes nothing.

        Returns:
            The overall readiness score as an integer in [0, 100].
        """
        raise NotImplementedError("Readiness models must implement combine()")
