"""Candidate evaluation and selection."""

from logo_agent.config import settings
from logo_agent.entities import FetchCandidate, QualityScore, ScoredCandidate
from logo_agent.errors import EmptyCandidateSet
from logo_agent.protocols import QualityScorer

from .heuristic_scorer import HeuristicQualityScorer


class QualityEvaluator:
    """Score, rank, filter and select logo candidates.

    Depends on the QualityScorer protocol, so the scoring strategy can be
    swapped without changing selection. Ranking is a stable sort, so among
    equal scores the earliest candidate in input order wins.

    Example:
        ```python
        evaluator = QualityEvaluator()
        best = evaluator.select_best(candidates)
        print(best.source, best.quality.overall)
        ```
    """

    def __init__(
        self,
        scorer: QualityScorer | None = None,
        threshold: float | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            scorer: Scoring strategy. Defaults to HeuristicQualityScorer.
            threshold: Default minimum overall score for filter(). Defaults to settings.
        """
        self._scorer = scorer or HeuristicQualityScorer()
        self._threshold = settings.quality_threshold if threshold is None else threshold

    def score(self, candidate: FetchCandidate) -> QualityScore:
        return self._scorer.score(candidate)

    def evaluate(self, candidates: list[FetchCandidate]) -> list[ScoredCandidate]:
        """Score every candidate, keeping input order."""
        return [ScoredCandidate(candidate=c, quality=self.score(c)) for c in candidates]

    def rank(self, candidates: list[FetchCandidate]) -> list[ScoredCandidate]:
        """Score candidates and sort them by overall score, best first."""
        return sorted(
            self.evaluate(candidates),
            key=lambda scored: scored.quality.overall,
            reverse=True,
        )

    def select_best(self, candidates: list[FetchCandidate]) -> ScoredCandidate:
        """Return the highest scoring candidate.

        Raises:
            EmptyCandidateSet: If no candidates are given
        """
        if not candidates:
            raise EmptyCandidateSet()
        return self.rank(candidates)[0]

    def filter(
        self,
        candidates: list[FetchCandidate],
        threshold: float | None = None,
    ) -> list[FetchCandidate]:
        """Drop candidates whose overall score is below the threshold."""
        minimum = self._threshold if threshold is None else threshold
        return [c for c in candidates if self.score(c).overall >= minimum]

    @property
    def threshold(self) -> float:
        """Get the default filter threshold."""
        return self._threshold

    @property
    def scorer(self) -> QualityScorer:
        """Get the underlying scorer (for testing)."""
        return self._scorer
