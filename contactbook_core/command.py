# contactbook_core/command.py
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional
import json


@dataclass
class Contact:
    """A single contact book entry."""
    id: Optional[int] = None        # None / non-positive -> store assigns one
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Contact":
        """Build a Contact from a backing-file entry. Raises on malformed entries."""
        if not isinstance(data, dict):
            raise TypeError(f"contact entry must be an object, got {type(data).__name__}")
        cid = data["id"]
        name = data["name"]
        if isinstance(cid, bool) or not isinstance(cid, int):
            raise ValueError(f"contact id must be an integer, got {cid!r}")
        if not isinstance(name, str):
            raise ValueError(f"contact name must be a string, got {name!r}")
        return Contact(id=cid, name=name)


@dataclass
class ContactUpdate:
    """
    Partial update for an existing contact.
    A slot left as None is not touched; id is never updatable.
    """
    name: Optional[str] = None

    def apply_to(self, contact: Contact) -> None:
        if self.name is not None:
            contact.name = self.name


@dataclass
class Command:
    """
    Request handed to the Dispatcher: an action tag plus a parameter bag.
    Built by the CLI, but any caller can construct one.
    """
    action: Optional[str]                                   # "get", "save", or anything else (no-op)
    params: Dict[str, Any] = field(default_factory=dict)    # e.g. {"id": 3, "name": "Alice"}
    source: str = "cli"                                     # "cli", "api", "test"

    def is_valid(self) -> bool:
        """Basic sanity checks before dispatch."""
        if self.action is not None and not isinstance(self.action, str):
            return False
        if not isinstance(self.params, dict):
            return False
        return True

    def get(self, key: str, default=None):
        return self.params.get(key, default)

    def to_json(self) -> str:
        """Stable JSON form, used for logging."""
        return json.dumps(asdict(self), ensure_ascii=False, sort_keys=True, default=str)

    def __repr__(self):
        return f"Command(action={self.action!r}, params={self.params!r}, source={self.source!r})"
