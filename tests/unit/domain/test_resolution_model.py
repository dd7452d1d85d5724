"""Unit tests for the Resolution record and clause formatting."""

import pytest

from src.domain.errors.store import MalformedDocumentError
from src.domain.models.resolution import (
    ClauseKind,
    Resolution,
    ResolutionHeader,
    format_clause,
)


class TestFormatClause:
    """Tests for stored clause formatting."""

    def test_preambulatory_is_emphasized(self) -> None:
        assert format_clause("Recalling", ClauseKind.PREAMBULATORY, 3) == "*Recalling*"

    def test_operative_is_numbered_from_existing_count(self) -> None:
        assert format_clause("Urges", ClauseKind.OPERATIVE, 0) == "1. _Urges_"
        assert format_clause("Urges", ClauseKind.OPERATIVE, 4) == "5. _Urges_"

    def test_document_fields(self) -> None:
        assert ClauseKind.PREAMBULATORY.document_field == "preambulatoryClauses"
        assert ClauseKind.OPERATIVE.document_field == "operativeClauses"


class TestWithClause:
    """Tests for append-only clause insertion."""

    def test_appends_without_touching_existing(self) -> None:
        original = Resolution(operative_clauses=("1. _Urges_",))
        updated, stored = original.with_clause("Calls upon", ClauseKind.OPERATIVE)

        assert stored == "2. _Calls upon_"
        assert updated.operative_clauses == ("1. _Urges_", "2. _Calls upon_")
        assert original.operative_clauses == ("1. _Urges_",)

    def test_preambulatory_list_grows_by_one(self) -> None:
        updated, stored = Resolution().with_clause("Noting", ClauseKind.PREAMBULATORY)
        assert updated.preambulatory_clauses == ("*Noting*",)
        assert updated.operative_clauses == ()
        assert stored == "*Noting*"


class TestResolutionDocuments:
    """Tests for resolution persistence."""

    def test_empty_map_is_blank_resolution(self) -> None:
        assert Resolution.from_document({}) == Resolution()

    def test_round_trip(self) -> None:
        resolution = Resolution(
            forum="GA",
            question_of="Ocean plastics",
            submitted_by="France",
            co_submitted_by="Chile",
            preambulatory_clauses=("*Recalling*",),
            operative_clauses=("1. _Urges_",),
        )
        assert Resolution.from_document(resolution.to_document()) == resolution

    def test_wrong_clause_type_rejected(self) -> None:
        with pytest.raises(MalformedDocumentError, match="operativeClauses"):
            Resolution.from_document({"operativeClauses": "1. _Urges_"})

    def test_wrong_header_type_rejected(self) -> None:
        with pytest.raises(MalformedDocumentError, match="forum"):
            Resolution.from_document({"forum": 7})

    def test_header_update_fields(self) -> None:
        header = ResolutionHeader(forum="GA", question_of="Q", submitted_by="S", co_submitted_by="C")
        assert header.to_update_fields() == {
            "resolution.forum": "GA",
            "resolution.questionOf": "Q",
            "resolution.submittedBy": "S",
            "resolution.coSubmittedBy": "C",
        }

    def test_header_property(self) -> None:
        resolution = Resolution(forum="GA", submitted_by="Peru")
        assert resolution.header == ResolutionHeader(forum="GA", submitted_by="Peru")
