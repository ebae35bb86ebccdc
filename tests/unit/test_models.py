"""
Unit tests for data models in certmatch.models.

Tests cover:
- MatchType enum values
- CertificateCandidate and MatchResult accessors
- RecipientMatch review state (accepted, reassigned, rejected)
- MatchSummary default values
"""

import pytest

from certmatch.models import (
    CandidateScore,
    CertificateCandidate,
    MatchResult,
    MatchSummary,
    MatchType,
    Recipient,
    RecipientMatch,
)


def make_result(confidence: int = 100, needs_review: bool = False) -> MatchResult:
    return MatchResult(
        candidate=CertificateCandidate("JohnDoe.pdf", handle="/certs/JohnDoe.pdf"),
        match_type=MatchType.EXACT,
        score=115,
        confidence=confidence,
        needs_review=needs_review,
    )


@pytest.mark.unit
class TestMatchType:
    """Tests for MatchType enum."""

    def test_values(self):
        assert MatchType.EXACT.value == "exact"
        assert MatchType.FILE_CONTAINS_NAME.value == "fileContainsName"
        assert MatchType.NAME_CONTAINS_FILE.value == "nameContainsFile"
        assert MatchType.FUZZY.value == "fuzzy"

    def test_lookup_by_value(self):
        assert MatchType("fuzzy") is MatchType.FUZZY


@pytest.mark.unit
class TestCandidateModels:
    """Tests for CertificateCandidate, CandidateScore and MatchResult."""

    def test_candidate_is_frozen(self):
        candidate = CertificateCandidate("a.pdf")
        with pytest.raises(AttributeError):
            candidate.filename = "b.pdf"

    def test_candidate_default_handle(self):
        assert CertificateCandidate("a.pdf").handle is None

    def test_candidate_score_matched(self):
        candidate = CertificateCandidate("a.pdf")
        assert CandidateScore(candidate, "abc", "abc", MatchType.EXACT, 100).matched
        assert not CandidateScore(candidate, "abc", "xyz", None).matched

    def test_match_result_accessors(self):
        result = make_result()
        assert result.filename == "JohnDoe.pdf"
        assert result.handle == "/certs/JohnDoe.pdf"
        assert result.similarity is None


@pytest.mark.unit
class TestRecipientMatch:
    """Tests for RecipientMatch review state."""

    def test_engine_match(self):
        match = RecipientMatch(Recipient(2, "John Doe"), make_result())

        assert match.matched
        assert match.certificate.filename == "JohnDoe.pdf"
        assert not match.manually_reviewed
        assert not match.needs_review

    def test_low_confidence_needs_review(self):
        match = RecipientMatch(Recipient(2, "John Doe"), make_result(60, True))
        assert match.needs_review

    def test_unmatched(self):
        match = RecipientMatch(Recipient(3, "Nobody"), None)

        assert not match.matched
        assert match.certificate is None
        assert not match.needs_review

    def test_accepted_clears_review_flag(self):
        match = RecipientMatch(
            Recipient(2, "John Doe"), make_result(60, True), review_decision="accepted"
        )

        assert match.matched
        assert match.manually_reviewed
        assert not match.needs_review
        assert match.certificate.filename == "JohnDoe.pdf"

    def test_reassigned_uses_override(self):
        override = CertificateCandidate("John_Doe_Final.pdf", handle="other")
        match = RecipientMatch(
            Recipient(2, "John Doe"),
            make_result(60, True),
            review_decision="reassigned",
            override=override,
        )

        assert match.certificate is override
        assert match.result.filename == "JohnDoe.pdf"

    def test_rejected_has_no_certificate(self):
        match = RecipientMatch(
            Recipient(2, "John Doe"), make_result(60, True), review_decision="rejected"
        )

        assert not match.matched
        assert match.certificate is None
        assert match.manually_reviewed

    def test_recipient_fields_default_empty(self):
        assert Recipient(2, "John Doe").fields == {}


@pytest.mark.unit
class TestMatchSummary:
    """Tests for MatchSummary defaults."""

    def test_defaults(self):
        summary = MatchSummary()

        assert summary.total_recipients == 0
        assert summary.matched == 0
        assert summary.shared_certificates == []
        assert summary.errors == []
        assert summary.interrupted is False

    def test_lists_not_shared_between_instances(self):
        first = MatchSummary()
        first.errors.append("warning")
        assert MatchSummary().errors == []
