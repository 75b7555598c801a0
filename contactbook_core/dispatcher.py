# File: contactbook_core/dispatcher.py
from typing import Any, List, Optional, Union
import logging

from contactbook_core.command import Command, Contact
from contactbook_core.contact_store import ContactStore

log = logging.getLogger(__name__)

DispatchOutcome = Union[Contact, List[Contact], None]


class DispatchError(Exception):
    """Raised for dispatcher-level failures (malformed command)."""
    pass


class ValidationError(DispatchError):
    """Raised when a request's parameters are missing or invalid. The store is never touched."""
    pass


def _as_id(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class Dispatcher:
    """
    Request Dispatcher.

    Responsibilities:
    - Accept Command objects (action + params)
    - Validate the params the action needs
    - Make exactly one ContactStore call and return its result

    Store errors (ContactNotFoundError, ContactStoreIOError) propagate unchanged.
    """

    def __init__(self, store: ContactStore):
        self.store = store

    async def execute(self, command: Command) -> DispatchOutcome:
        """
        Execute a Command.

        - get  + int id -> Contact or None (a miss is logged, not raised)
        - get           -> list of all contacts (copies)
        - save          -> adds a contact, returns None
        - anything else -> no-op, returns None
        """
        if not isinstance(command, Command):
            raise DispatchError("Invalid command object")

        if not command.is_valid():
            raise DispatchError("Command failed basic validation")

        log.debug("Dispatching %s", command.to_json())

        if command.action == "get":
            return self._get(command)
        if command.action == "save":
            await self._save(command)
            return None

        log.warning("No valid action specified or action not supported: %r", command.action)
        return None

    def _get(self, command: Command) -> DispatchOutcome:
        contact_id = _as_id(command.get("id"))
        if contact_id is None:
            return self.store.get_all_contacts()
        contact = self.store.get_one_by_id(contact_id)
        if contact is None:
            log.warning("Contact with ID %s not found.", contact_id)
        return contact

    async def _save(self, command: Command) -> None:
        name = command.get("name")
        if not isinstance(name, str) or name.strip() == "":
            log.error("Save action requires valid 'name' in params.")
            raise ValidationError("Missing or invalid 'name' for save action.")

        # None lets the store generate an id; a taken id is reassigned there
        contact = Contact(id=_as_id(command.get("id")), name=name)
        stored = await self.store.add_contact(contact)
        log.info("Contact saved with ID %s.", stored.id)
