# contactbook_core/cli.py
"""
Command-line entry point.

    python -m contactbook_core.cli --action=save --name="Alice"
    python -m contactbook_core.cli --action=get
    python -m contactbook_core.cli --action=get --id=1

Results go to stdout as JSON; logs and errors go to stderr.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from contactbook_core.command import Command, Contact
from contactbook_core.contact_store import ContactStore, ContactStoreError
from contactbook_core.dispatcher import Dispatcher, DispatchError, DispatchOutcome
from contactbook_core.settings_store import SettingsStore

log = logging.getLogger("contactbook")


def _parse_id(raw: Optional[str]) -> Optional[int]:
    """Non-integer or zero --id values count as "no id given"."""
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        log.warning("Ignoring non-numeric --id value %r", raw)
        return None
    return value or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contactbook", description="JSON-file backed contact book")
    parser.add_argument("--action", default=None,
                        help="get | save (anything else is a no-op)")
    parser.add_argument("--id", default=None,
                        help="contact id (get: look up one contact; save: requested id)")
    parser.add_argument("--name", default=None, help="contact name (required for save)")
    parser.add_argument("--file", default=None, help="backing JSON file (overrides settings)")
    parser.add_argument("--settings", default=None, help="settings file, YAML or JSON")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    return parser


def build_command(args: argparse.Namespace) -> Command:
    params = {}
    contact_id = _parse_id(args.id)
    if contact_id is not None:
        params["id"] = contact_id
    if args.name is not None:
        params["name"] = args.name
    return Command(action=args.action, params=params, source="cli")


def format_result(result: DispatchOutcome) -> Optional[str]:
    if result is None:
        return None
    if isinstance(result, Contact):
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    return json.dumps([c.to_dict() for c in result], indent=2, ensure_ascii=False)


async def _run(store: ContactStore, command: Command) -> DispatchOutcome:
    await store.load()
    dispatcher = Dispatcher(store)
    return await dispatcher.execute(command)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = SettingsStore(args.settings)
    level_name = (args.log_level or settings.get_log_level()).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")

    store = ContactStore(args.file or settings.get_data_file(),
                         atomic_writes=settings.get_atomic_writes())
    command = build_command(args)

    try:
        result = asyncio.run(_run(store, command))
    except (ContactStoreError, DispatchError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = format_result(result)
    if text is not None:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
