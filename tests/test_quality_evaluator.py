"""
Tests for image validation, heuristic scoring and candidate selection.
"""

import pytest

from logo_agent.entities import FetchCandidate, QualityScore
from logo_agent.errors import EmptyCandidateSet
from logo_agent.services import HeuristicQualityScorer, QualityEvaluator
from logo_agent.utils import detect_image_format, file_extension_for, is_valid_logo_buffer

KIB = 1024


@pytest.mark.parametrize(
    "header, expected",
    [
        (b"\x89PNG\r\n\x1a\n", "png"),
        (b"GIF89a", "gif"),
        (b"\xff\xd8\xff\xe0", "jpeg"),
        (b"\xff\xd8\xff\xe1", "jpeg"),
        (b"\xff\xd8\xff\xe2", "jpeg"),
        (b"%PDF-1.7", None),
        (b"<svg", None),
    ],
)
def test_detect_image_format(header, expected):
    assert detect_image_format(header + b"\x00" * 2048) == expected


def test_is_valid_logo_buffer_bounds(make_png):
    assert not is_valid_logo_buffer(b"")
    assert not is_valid_logo_buffer(make_png(1023))
    assert is_valid_logo_buffer(make_png(1024))
    assert is_valid_logo_buffer(make_png(10 * 1024 * 1024))
    assert not is_valid_logo_buffer(make_png(10 * 1024 * 1024 + 1))


def test_file_extension_for(make_png):
    assert file_extension_for(make_png(2048)) == ".png"
    assert file_extension_for(b"\xff\xd8\xff\xe1" + b"\x00" * 10) == ".jpg"
    assert file_extension_for(b"GIF87a") == ".gif"
    assert file_extension_for(b"unknown") == ".png"


def test_invalid_buffer_scores_zero():
    scorer = HeuristicQualityScorer()
    score = scorer.score(FetchCandidate(data=b"not an image" * 200, source="x"))

    assert score == QualityScore.zero()


def test_heuristic_tiers(make_png):
    scorer = HeuristicQualityScorer()

    small = scorer.score(FetchCandidate(data=make_png(5 * KIB), source="small"))
    assert small.resolution == 0.2
    assert small.color == 0.3
    assert small.aspect_ratio == 0.8
    assert small.byte_size == 5 * KIB

    medium = scorer.score(FetchCandidate(data=make_png(50 * KIB), source="medium"))
    assert medium.resolution == 0.5
    assert medium.color == 0.6

    large = scorer.score(FetchCandidate(data=make_png(600 * KIB), source="large"))
    assert large.resolution == 1.0
    assert large.color == 0.9


def test_overall_is_weighted_sum(make_png):
    score = HeuristicQualityScorer().score(FetchCandidate(data=make_png(300 * KIB), source="x"))

    expected = (300 * KIB / (1024 * 1024)) * 0.30 + 0.8 * 0.40 + 0.8 * 0.15 + 0.9 * 0.15
    assert score.overall == pytest.approx(expected)


def test_overall_is_clamped(make_png):
    score = HeuristicQualityScorer().score(FetchCandidate(data=make_png(8 * 1024 * 1024), source="x"))

    assert score.size > 1.0
    assert score.overall == 1.0


def test_larger_candidate_ranks_first(make_png):
    small = FetchCandidate(data=make_png(5 * KIB), source="https://a.example/small.png")
    large = FetchCandidate(data=make_png(300 * KIB), source="https://b.example/large.png")

    ranked = QualityEvaluator().rank([small, large])

    assert [scored.source for scored in ranked] == [large.source, small.source]
    assert ranked[0].quality.overall > ranked[1].quality.overall


def test_ties_keep_input_order(make_png):
    first = FetchCandidate(data=make_png(5 * KIB), source="first")
    second = FetchCandidate(data=make_png(5 * KIB), source="second")

    assert QualityEvaluator().select_best([first, second]).source == "first"
    assert QualityEvaluator().select_best([second, first]).source == "second"


def test_select_best_on_empty_raises():
    with pytest.raises(EmptyCandidateSet):
        QualityEvaluator().select_best([])


def test_select_best_returns_data(make_png):
    best = QualityEvaluator().select_best([FetchCandidate(data=make_png(2 * KIB), source="only")])

    assert best.data == make_png(2 * KIB)


def test_filter_uses_threshold(make_png):
    invalid = FetchCandidate(data=b"junk" * 512, source="junk")
    small = FetchCandidate(data=make_png(5 * KIB), source="small")
    medium = FetchCandidate(data=make_png(50 * KIB), source="medium")
    evaluator = QualityEvaluator(threshold=0.3)

    assert evaluator.filter([invalid, small, medium]) == [medium]
    assert evaluator.filter([invalid, small, medium], threshold=0.0) == [invalid, small, medium]
    assert evaluator.filter([invalid, small, medium], threshold=0.9) == []
    assert evaluator.threshold == 0.3


def test_custom_scorer_is_used(make_png):
    class ReverseScorer:
        @property
        def name(self) -> str:
            return "reverse"

        def score(self, candidate):
            value = 1.0 / candidate.size
            return QualityScore(size=0, resolution=0, aspect_ratio=0, color=0, overall=value)

    evaluator = QualityEvaluator(scorer=ReverseScorer())
    best = evaluator.select_best(
        [
            FetchCandidate(data=make_png(300 * KIB), source="large"),
            FetchCandidate(data=make_png(5 * KIB), source="small"),
        ]
    )

    assert best.source == "small"
    assert evaluator.scorer.name == "reverse"
