"""Fetch candidate and quality score entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchCandidate:
    """One retrieved, validated image payload competing to become the logo.

    Attributes:
        data: Raw image bytes
        source: URL the bytes were fetched from
    """

    data: bytes
    source: str

    @property
    def size(self) -> int:
        """Size of the payload in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class QualityScore:
    """Heuristic quality sub-scores and their weighted overall value.

    Attributes:
        size: Byte size normalized against 1 MiB (not clamped)
        resolution: Resolution estimate (0-1)
        aspect_ratio: Aspect ratio estimate (0-1)
        color: Color richness estimate (0-1)
        overall: Weighted sum, clamped to [0, 1]
        byte_size: Raw payload length in bytes
    """

    size: float
    resolution: float
    aspect_ratio: float
    color: float
    overall: float
    byte_size: int = 0

    @classmethod
    def zero(cls) -> "QualityScore":
        """Score assigned to buffers that fail validation."""
        return cls(size=0.0, resolution=0.0, aspect_ratio=0.0, color=0.0, overall=0.0)


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate paired with its quality score."""

    candidate: FetchCandidate
    quality: QualityScore

    @property
    def source(self) -> str:
        return self.candidate.source

    @property
    def data(self) -> bytes:
        return self.candidate.data
