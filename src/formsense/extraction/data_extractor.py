"""Candidate data extraction from reference documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formsense.logging import get_logger
from formsense.parsing.text_extractor import TextExtractor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formsense.typing.models import CandidateData, LibraryDocument
    from formsense.typing.protocol import DocumentLibrary

logger = get_logger(__name__)

_ENTITY_KEYS = ("emails", "phones", "dates", "addresses")


class DataExtractor:
    """Build candidate data from structured fields and free-text content."""

    def __init__(
        self,
        library: DocumentLibrary | None = None,
        *,
        text_extractor: TextExtractor | None = None,
    ) -> None:
        """Initialize extractor.

        Args:
            library (DocumentLibrary | None): Document source for `extract_from_library`.
            text_extractor (TextExtractor | None): Entity extraction component.
        """
        self._library = library
        self._text_extractor = text_extractor or TextExtractor()

    def extract_from_documents(self, documents: Iterable[LibraryDocument]) -> CandidateData:
        """Merge candidate data from documents.

        Structured values from later documents replace earlier ones under the
        same key. Entities found in content are appended to the lists stored
        under ``emails``, ``phones``, ``dates`` and ``addresses``.

        Args:
            documents (Iterable[LibraryDocument]): Documents in priority order.

        Returns:
            CandidateData: Merged candidate values.
        """
        candidate_data: dict[str, Any] = {}
        count = 0
        for document in documents:
            count += 1
            if document.structured_data:
                candidate_data.update(document.structured_data)
            if document.content:
                self._merge_entities(candidate_data, document.content)
        logger.info("Candidate data extracted", extra={"documents": count, "keys": len(candidate_data)})
        return candidate_data

    def extract_from_library(self, user_id: str, document_ids: list[str]) -> CandidateData:
        """Fetch documents from the library and extract candidate data.

        Args:
            user_id (str): Owner identifier.
            document_ids (list[str]): Documents to use.

        Raises:
            ValueError: If no document library is configured.

        Returns:
            CandidateData: Merged candidate values.
        """
        if self._library is None:
            msg = "A document library is required to extract data by document id"
            raise ValueError(msg)
        return self.extract_from_documents(self._library.fetch_documents(user_id, document_ids))

    def _merge_entities(self, candidate_data: dict[str, Any], content: str) -> None:
        entities = self._text_extractor.extract_entities(content)
        for key in _ENTITY_KEYS:
            found: list[str] = getattr(entities, key)
            if not found:
                continue
            existing = candidate_data.get(key)
            if isinstance(existing, list):
                candidate_data[key] = [*existing, *found]
            else:
                candidate_data[key] = list(found)
