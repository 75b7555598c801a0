# contactbook_core/contact_store.py
"""
ContactStore — in-memory contact list backed by one JSON file.

Responsibilities:
- Load the backing file once at startup (absent file -> empty list)
- Keep ids unique, assigning max(id) + 1 when needed
- Serve lookups and listings from memory (no I/O)
- Persist the whole list after every mutation

Non-responsibilities:
- No input validation beyond id handling (the Dispatcher does that)
- No locking; one process, one request at a time

load() must be awaited before anything else. This is not checked at runtime.
"""

from __future__ import annotations
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio
import json
import logging
import os
import shutil
import tempfile

from contactbook_core import config
from contactbook_core.command import Contact, ContactUpdate

log = logging.getLogger(__name__)


class ContactStoreError(Exception):
    """Base class for store failures."""
    pass


class ContactStoreIOError(ContactStoreError):
    """Raised when the backing file cannot be read, parsed or written (absence is not an error)."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ContactNotFoundError(ContactStoreError, KeyError):
    """Raised by update/delete when no contact has the given id."""

    def __init__(self, contact_id: int):
        super().__init__(contact_id)
        self.contact_id = contact_id

    def __str__(self):
        return f"Contact with ID {self.contact_id} not found."


def _is_requested_id(value: Any) -> bool:
    # bool is an int subclass; True is not an id. Ids are positive: 0 and negatives
    # mean "no id requested" and get a generated id instead.
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


class ContactStore:
    def __init__(self, path: Union[str, Path, None] = None, atomic_writes: Optional[bool] = None):
        self.path = Path(path or config.CONTACTBOOK_DATA_FILE)
        self.atomic_writes = config.CONTACTBOOK_ATOMIC_WRITES if atomic_writes is None else bool(atomic_writes)
        self._contacts: List[Contact] = []
        self.is_loaded = False

    def __len__(self) -> int:
        return len(self._contacts)

    # ---------- persistence ----------

    async def load(self) -> None:
        """
        Read the backing file into memory.
        On failure the previous in-memory list is kept as-is.
        """
        try:
            contacts = await asyncio.to_thread(self._read_file)
        except ContactStoreIOError as e:
            log.error("Error loading contacts file %s: %s", self.path, e)
            raise
        self._contacts = contacts
        self.is_loaded = True
        log.info("Loaded %d contacts from %s", len(contacts), self.path)

    async def save(self) -> None:
        """Overwrite the backing file with the full in-memory list. Memory is never changed here."""
        payload = [c.to_dict() for c in self._contacts]
        try:
            await asyncio.to_thread(self._write_file, payload)
        except ContactStoreIOError as e:
            log.error("Error saving contacts file %s: %s", self.path, e)
            raise
        log.info("Saved %d contacts to %s", len(payload), self.path)

    def _read_file(self) -> List[Contact]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            log.warning("%s not found. Starting with an empty contact list.", self.path)
            return []
        except (OSError, ValueError) as e:
            raise ContactStoreIOError(f"cannot read {self.path}: {e}", self.path) from e

        if not isinstance(data, list):
            log.warning("%s does not hold a JSON array. Starting with an empty contact list.", self.path)
            return []

        try:
            contacts = [Contact.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise ContactStoreIOError(f"malformed contact entry in {self.path}: {e}", self.path) from e

        seen = set()
        for c in contacts:
            if c.id in seen:
                raise ContactStoreIOError(f"duplicate contact id {c.id} in {self.path}", self.path)
            seen.add(c.id)
        return contacts

    def _write_file(self, payload: List[Dict[str, Any]]) -> None:
        # encode before opening anything, so a bad name never truncates the file
        try:
            data = (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
        except UnicodeEncodeError as e:
            raise ContactStoreIOError(f"cannot encode contacts for {self.path}: {e}", self.path) from e
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.atomic_writes:
                self._write_atomic(data)
            else:
                with self.path.open("wb") as f:
                    f.write(data)
        except OSError as e:
            raise ContactStoreIOError(f"cannot write {self.path}: {e}", self.path) from e

    def _write_atomic(self, data: bytes) -> None:
        # temp file must live in the same directory for os.replace to be a rename
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            if self.path.exists():
                shutil.copymode(self.path, tmp)
            else:
                # mkstemp creates 0600; a new file gets the same mode open() would give it
                os.chmod(tmp, 0o666 & ~_current_umask())
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    # ---------- reads (no I/O) ----------

    def get_one_by_id(self, contact_id: int) -> Optional[Contact]:
        """Return a copy of the contact with this id, or None."""
        index = self._index_of(contact_id)
        if index is None:
            return None
        return replace(self._contacts[index])

    def get_all_contacts(self) -> List[Contact]:
        """Return copies of all contacts, in insertion order."""
        return [replace(c) for c in self._contacts]

    # ---------- mutations (memory first, then save) ----------

    async def add_contact(self, contact: Contact) -> Contact:
        """
        Append a contact and persist.

        A missing, non-positive or already-taken id is replaced by a fresh one.
        If save() fails the contact stays in memory (memory and disk diverge).
        Returns a copy of the stored contact; `contact` itself is not modified.
        """
        requested = contact.id
        if not _is_requested_id(requested):
            new_id = self._generate_new_id()
        elif self._index_of(requested) is not None:
            new_id = self._generate_new_id()
            log.warning("Contact with ID %s already exists. Assigning new ID %s.", requested, new_id)
        else:
            new_id = requested

        stored = Contact(id=new_id, name=contact.name)
        self._contacts.append(stored)
        await self.save()
        return replace(stored)

    async def update_contact(self, contact_id: int, updates: ContactUpdate) -> Contact:
        index = self._index_of(contact_id)
        if index is None:
            raise ContactNotFoundError(contact_id)
        updates.apply_to(self._contacts[index])
        await self.save()
        return replace(self._contacts[index])

    async def delete_contact(self, contact_id: int) -> None:
        remaining = [c for c in self._contacts if c.id != contact_id]
        if len(remaining) == len(self._contacts):
            raise ContactNotFoundError(contact_id)
        self._contacts = remaining
        await self.save()

    # ---------- helpers ----------

    def _index_of(self, contact_id: int) -> Optional[int]:
        for i, c in enumerate(self._contacts):
            if c.id == contact_id:
                return i
        return None

    def _generate_new_id(self) -> int:
        # ids freed by deleting the current max are handed out again
        return max((c.id for c in self._contacts), default=0) + 1
