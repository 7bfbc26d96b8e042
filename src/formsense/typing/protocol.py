"""Collaborator interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from formsense.typing.models import DetectedField, LibraryDocument, Page


class ReasoningClient(Protocol):
    """AI reasoning service used to propose field values."""

    async def complete(self, prompt: str) -> str:
        """Submit a prompt and return the raw text answer.

        Args:
            prompt: Bounded prompt text.

        Returns:
            str: Free text expected to hold a JSON mapping payload.
        """


class DocumentLibrary(Protocol):
    """Source of a user's reference documents."""

    def fetch_documents(self, user_id: str, document_ids: list[str]) -> list[LibraryDocument]:
        """Fetch documents owned by a user.

        Args:
            user_id: Owner identifier.
            document_ids: Documents to fetch.

        Returns:
            list[LibraryDocument]: Documents found, in library order.
        """


class DetectionHeuristic(Protocol):
    """Single field detection strategy."""

    def detect(self, page: Page) -> list[DetectedField]:
        """Detect fields on one page.

        Args:
            page: Page to scan.

        Returns:
            list[DetectedField]: Fields found, in text order.
        """
