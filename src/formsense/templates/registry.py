"""Template catalog shared across matching operations."""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

from formsense import logger
from formsense.templates.store import TemplateStore, load_builtin_templates

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from formsense.settings import Settings
    from formsense.typing.models import FormTemplate


class TemplateRegistry:
    """Catalog of known form templates.

    Reads work on an immutable snapshot of the catalog. `add_template` builds
    a new snapshot under a lock and swaps it in, so concurrent readers see
    either the old or the new catalog, never a partial one.
    """

    def __init__(
        self,
        templates: Iterable[FormTemplate] = (),
        *,
        store: TemplateStore | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            templates (Iterable[FormTemplate]): Initial templates, in registration order.
            store (TemplateStore | None): Directory loaded after `templates` and written on add.
        """
        self._lock = threading.Lock()
        self._store = store

        initial: dict[str, FormTemplate] = {}
        for template in templates:
            initial[template.id] = template
        if store is not None:
            for template in store.load_all():
                initial[template.id] = template
        self._snapshot: Mapping[str, FormTemplate] = MappingProxyType(initial)
        logger.info("Templates loaded", extra={"templates": len(initial)})

    @classmethod
    def with_builtin_catalog(cls, *, store: TemplateStore | None = None) -> TemplateRegistry:
        """Build a registry holding the built-in templates.

        Args:
            store (TemplateStore | None): Optional extra template directory.

        Returns:
            TemplateRegistry: Populated registry.
        """
        return cls(load_builtin_templates(), store=store)

    @classmethod
    def from_settings(cls, settings: Settings) -> TemplateRegistry:
        """Build a registry from built-ins and the configured template directory."""
        store = TemplateStore(root=settings.template_store_dir) if settings.template_store_dir else None
        return cls.with_builtin_catalog(store=store)

    def list_templates(self) -> list[FormTemplate]:
        """Return all templates in registration order."""
        return list(self._snapshot.values())

    def get_template(self, template_id: str) -> FormTemplate | None:
        """Return a template by id, or None when absent."""
        return self._snapshot.get(template_id)

    def add_template(self, template: FormTemplate) -> None:
        """Insert a template or replace the one with the same id.

        A replaced template keeps its registration position.

        Args:
            template (FormTemplate): Template to register.

        Raises:
            TemplateStoreError: If the configured store cannot write the template.
        """
        with self._lock:
            updated = dict(self._snapshot)
            updated[template.id] = template
            if self._store is not None:
                self._store.save(template)
            self._snapshot = MappingProxyType(updated)
        logger.info("Template added", extra={"template_id": template.id})

    def __len__(self) -> int:
        """Return the number of registered templates."""
        return len(self._snapshot)

    def __contains__(self, template_id: object) -> bool:
        """Return whether a template id is registered."""
        return template_id in self._snapshot
