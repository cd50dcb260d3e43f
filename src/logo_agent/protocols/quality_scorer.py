"""Quality scorer protocol.

The default scorer estimates quality from the byte size alone. A scorer that
decodes the image can be substituted without touching selection or eviction.
"""

from typing import Protocol, runtime_checkable

from logo_agent.entities import FetchCandidate, QualityScore


@runtime_checkable
class QualityScorer(Protocol):
    """Protocol for candidate quality scoring strategies."""

    @property
    def name(self) -> str:
        """Return the identifier of the scoring strategy."""
        ...

    def score(self, candidate: FetchCandidate) -> QualityScore:
        """Score a single candidate.

        Args:
            candidate: The candidate to score

        Returns:
            QualityScore with overall in [0, 1]; all zero for invalid buffers
        """
        ...
