"""Byte-size based quality scorer.

No pixels are decoded: resolution and color richness are bucketed from the
payload size and the aspect ratio is a fixed estimate. Substitute another
QualityScorer for a decoding implementation.
"""

from logo_agent.entities import FetchCandidate, QualityScore
from logo_agent.utils import is_valid_logo_buffer

SIZE_REFERENCE_BYTES = 1024 * 1024

WEIGHTS = {
    "size": 0.30,
    "resolution": 0.40,
    "aspect_ratio": 0.15,
    "color": 0.15,
}

# Placeholder until real dimensions are available
DEFAULT_ASPECT_RATIO_SCORE = 0.8


def estimate_resolution(size_bytes: int) -> float:
    size_kb = size_bytes / 1024
    if size_kb < 10:
        return 0.2
    if size_kb < 100:
        return 0.5
    if size_kb < 500:
        return 0.8
    return 1.0


def estimate_color_richness(size_bytes: int) -> float:
    size_kb = size_bytes / 1024
    if size_kb < 20:
        return 0.3
    if size_kb < 100:
        return 0.6
    return 0.9


class HeuristicQualityScorer:
    """Default implementation of the QualityScorer protocol."""

    @property
    def name(self) -> str:
        return "heuristic-bytesize"

    def score(self, candidate: FetchCandidate) -> QualityScore:
        """Score a candidate from its byte size.

        Args:
            candidate: The candidate to score

        Returns:
            QualityScore; all zero if the buffer fails validation
        """
        data = candidate.data
        if not is_valid_logo_buffer(data):
            return QualityScore.zero()

        byte_size = len(data)
        size = byte_size / SIZE_REFERENCE_BYTES
        resolution = estimate_resolution(byte_size)
        aspect_ratio = DEFAULT_ASPECT_RATIO_SCORE
        color = estimate_color_richness(byte_size)

        weighted = (
            size * WEIGHTS["size"]
            + resolution * WEIGHTS["resolution"]
            + aspect_ratio * WEIGHTS["aspect_ratio"]
            + color * WEIGHTS["color"]
        )

        return QualityScore(
            size=size,
            resolution=resolution,
            aspect_ratio=aspect_ratio,
            color=color,
            overall=max(0.0, min(1.0, weighted)),
            byte_size=byte_size,
        )
