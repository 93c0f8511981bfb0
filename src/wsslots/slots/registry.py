"""
Slot Role Registry

Keeps track of which slot roles exist on this wiki, which content model a
role uses by default and how the role is laid out when a page is rendered.

The `main` role is always defined. Additional roles come from
`Settings.defined_slots`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..config import Settings
from .models import MAIN_SLOT, PageIdentity

logger = logging.getLogger("wsslots.registry")


# Namespaces whose pages can hold site or user scripts and styles
_CODE_NAMESPACES = ("MediaWiki:", "User:")

_CODE_SUFFIX_MODELS = {
    ".css": "css",
    ".js": "javascript",
    ".json": "json",
}


class SlotRoleHandler:
    """
    Per-role behaviour: default content model and display layout.
    """

    def __init__(
        self,
        role: str,
        model_id: str,
        layout: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.role = role
        self._model_id = model_id
        self.layout: Dict[str, Any] = dict(layout or {})

    def get_default_model(self, page: PageIdentity) -> str:
        return self._model_id


class MainSlotRoleHandler(SlotRoleHandler):
    """
    The `main` role picks a code model for script and style pages.
    """

    def get_default_model(self, page: PageIdentity) -> str:
        if page.title.startswith(_CODE_NAMESPACES):
            for suffix, model_id in _CODE_SUFFIX_MODELS.items():
                if page.title.endswith(suffix):
                    return model_id
        return self._model_id


class SlotRoleRegistry:
    """
    Registry of defined slot roles.
    """

    def __init__(self, main_model: str = "wikitext") -> None:
        self._handlers: Dict[str, SlotRoleHandler] = {
            MAIN_SLOT: MainSlotRoleHandler(
                MAIN_SLOT,
                main_model,
                {"display": "section", "region": "center", "placement": "prepend"},
            )
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "SlotRoleRegistry":
        """
        Build a registry with every slot listed in `settings.defined_slots`.

        Raises
        ------
        ValueError
            If a configured role is already defined (including `main`).
        """
        registry = cls(main_model=settings.default_content_model)

        for role, definition in settings.defined_slots.items():
            registry.define_role(
                role,
                definition.content_model or settings.default_content_model,
                definition.slot_role_layout or settings.default_slot_role_layout,
            )

        return registry

    def define_role(
        self,
        role: str,
        model_id: str,
        layout: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not role:
            raise ValueError("Slot role name must be non-empty.")

        if role in self._handlers:
            raise ValueError(f"Slot role '{role}' is already defined.")

        logger.debug("Defining slot role %s with model %s", role, model_id)
        self._handlers[role] = SlotRoleHandler(role, model_id, layout)

    def is_defined_role(self, role: str) -> bool:
        return role in self._handlers

    def get_role_handler(self, role: str) -> SlotRoleHandler:
        try:
            return self._handlers[role]
        except KeyError:
            raise KeyError(f"Undefined slot role: {role}") from None

    def get_defined_roles(self) -> List[str]:
        return list(self._handlers)
