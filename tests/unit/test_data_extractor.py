from __future__ import annotations

import pytest

from formsense.extraction.data_extractor import DataExtractor
from formsense.typing.models import LibraryDocument


class _FakeLibrary:
    def __init__(self, documents: list[LibraryDocument]) -> None:
        self.documents = documents
        self.calls: list[tuple[str, list[str]]] = []

    def fetch_documents(self, user_id: str, document_ids: list[str]) -> list[LibraryDocument]:
        self.calls.append((user_id, document_ids))
        return [document for document in self.documents if document.id in document_ids]


def test_structured_data_merges_with_later_documents_winning() -> None:
    documents = [
        LibraryDocument(id="d1", structured_data={"company_name": "Old Co", "city": "Paris"}),
        LibraryDocument(id="d2", structured_data={"company_name": "Acme"}),
    ]

    candidate_data = DataExtractor().extract_from_documents(documents)

    assert candidate_data == {"company_name": "Acme", "city": "Paris"}


def test_entities_accumulate_across_documents() -> None:
    documents = [
        LibraryDocument(id="d1", content="Write to sales@acme.test or call 555-123-4567."),
        LibraryDocument(id="d2", content="Support: help@acme.test, signed 02/03/2024."),
    ]

    candidate_data = DataExtractor().extract_from_documents(documents)

    assert candidate_data["emails"] == ["sales@acme.test", "help@acme.test"]
    assert candidate_data["phones"] == ["555-123-4567"]
    assert candidate_data["dates"] == ["02/03/2024"]
    assert "addresses" not in candidate_data


def test_documents_without_data_give_empty_candidates() -> None:
    assert DataExtractor().extract_from_documents([LibraryDocument(id="d1")]) == {}


def test_extract_from_library_fetches_by_user_and_ids() -> None:
    library = _FakeLibrary(
        [
            LibraryDocument(id="d1", structured_data={"firm_name": "Acme"}),
            LibraryDocument(id="d2", structured_data={"firm_name": "Other"}),
        ],
    )

    candidate_data = DataExtractor(library).extract_from_library("user-1", ["d1"])

    assert candidate_data == {"firm_name": "Acme"}
    assert library.calls == [("user-1", ["d1"])]


def test_extract_from_library_requires_a_library() -> None:
    with pytest.raises(ValueError, match="document library"):
        DataExtractor().extract_from_library("user-1", ["d1"])
