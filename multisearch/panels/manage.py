"""
Manage Panel - Toolkit-free state for the engine grid and its forms.

Front ends render from this object and forward clicks to it. It owns the
transient UI state the store deliberately knows nothing about:

- Bulk delete flow:
    IDLE → SELECTING → CONFIRMING → APPLIED
  Clicking an engine toggles it while idle and selects it while selecting.
  Only confirm_delete() touches the store, through remove_many().
- Add/edit drafts that feed add_engine()/edit_engine(). A rejected draft
  stays open so the user can fix it.
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from multisearch.errors import ValidationError
from multisearch.search.engine import Engine
from multisearch.services.engine_store import EngineStore


class DeleteMode(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    CONFIRMING = "confirming"
    APPLIED = "applied"


# Allowed transitions; cancel() may always return to IDLE
_TRANSITIONS = {
    DeleteMode.IDLE: {DeleteMode.SELECTING},
    DeleteMode.SELECTING: {DeleteMode.CONFIRMING},
    DeleteMode.CONFIRMING: {DeleteMode.SELECTING, DeleteMode.APPLIED},
    DeleteMode.APPLIED: {DeleteMode.SELECTING},
}


@dataclass
class Draft:
    """Form fields for an engine being added (engine_id None) or edited."""
    engine_id: str | None = None
    name: str = ""
    url: str = ""
    icon: str = ""


class ManagePanel:
    """
    Presentation state for managing engines.

    Attributes:
        mode: Current step of the bulk delete flow
        selected: Ids picked for deletion, in click order
        draft: Open add/edit form, or None
    """

    def __init__(self, store: EngineStore):
        self.store = store
        self.mode = DeleteMode.IDLE
        self.selected: list[str] = []
        self.draft: Draft | None = None

    @property
    def selecting(self) -> bool:
        return self.mode in (DeleteMode.SELECTING, DeleteMode.CONFIRMING)

    def _transition(self, target: DeleteMode) -> None:
        if target not in _TRANSITIONS[self.mode]:
            raise ValueError(f"Cannot go from {self.mode.value} to {target.value}")
        logger.debug(f"Manage panel: {self.mode.value} -> {target.value}")
        self.mode = target

    # Bulk delete flow

    def enter_delete_mode(self) -> None:
        self._transition(DeleteMode.SELECTING)
        self.selected = []

    def click_engine(self, engine_id: str) -> None:
        """Toggle the engine while idle, or its selection while selecting."""
        if self.mode is DeleteMode.SELECTING:
            if engine_id in self.selected:
                self.selected.remove(engine_id)
            else:
                self.selected.append(engine_id)
        elif self.mode is DeleteMode.CONFIRMING:
            logger.debug("Click ignored while confirming delete")
        else:
            self.store.toggle_enabled(engine_id)

    def request_delete(self) -> None:
        """Ask for confirmation of the current selection."""
        if self.mode is DeleteMode.SELECTING and not self.selected:
            raise ValidationError("Select at least one site to delete")
        self._transition(DeleteMode.CONFIRMING)

    def cancel_confirm(self) -> None:
        """Back out of the confirmation, keeping the selection."""
        self._transition(DeleteMode.SELECTING)

    def confirm_delete(self) -> int:
        """
        Delete the selected engines.

        Returns:
            Number of engines removed
        """
        if self.mode is not DeleteMode.CONFIRMING:
            raise ValueError(f"Nothing to confirm in {self.mode.value} mode")

        removed = self.store.remove_many(self.selected)
        self._transition(DeleteMode.APPLIED)
        self.selected = []
        return removed

    def cancel(self) -> None:
        """Leave the delete flow entirely."""
        self.mode = DeleteMode.IDLE
        self.selected = []

    # Add / edit forms

    def start_add(self) -> Draft:
        self.draft = Draft()
        return self.draft

    def start_edit(self, engine_id: str) -> Draft | None:
        engine = self.store.get(engine_id)
        if engine is None:
            return None
        self.draft = Draft(
            engine_id=engine.id,
            name=engine.name,
            url=engine.url,
            icon=engine.icon,
        )
        return self.draft

    def discard_draft(self) -> None:
        self.draft = None

    def submit(self) -> Engine | None:
        """
        Save the open draft through the store.

        Raises:
            ValidationError: If the draft is missing a name or URL (draft stays open)
        """
        if self.draft is None:
            return None

        draft = self.draft
        if draft.engine_id is None:
            engine = self.store.add_engine(draft.name, draft.url, draft.icon)
        else:
            engine = self.store.edit_engine(draft.engine_id, draft.name, draft.url, draft.icon)

        self.draft = None
        return engine
