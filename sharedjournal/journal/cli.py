"""
Shared journals administrative CLI
"""
import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List

from . import actions
from ..db import SessionLocal
from .models import SharedJournal, SharedJournalEntry


def journal_as_json_dict(journal: SharedJournal) -> Dict[str, Any]:
    """
    Returns a representation of the given journal as a JSON-serializable dictionary.
    """
    return {
        "share_key": journal.share_key,
        "title": journal.title,
        "created_by_id": journal.created_by_id,
        "created_by_username": journal.created_by_username,
        "editable_by_anyone": journal.editable_by_anyone,
        "created_at": str(journal.created_at),
        "updated_at": str(journal.updated_at),
    }


def entries_as_json_dict(entries: List[SharedJournalEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "id": entry.id,
            "content": entry.content,
            "date": str(entry.date),
            "updated_at": str(entry.updated_at),
            "created_by_id": entry.created_by_id,
            "last_edited_by_id": entry.last_edited_by_id,
        }
        for entry in entries
    ]


def journals_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals list" subcommand.
    """
    session = SessionLocal()
    try:
        journals = asyncio.run(actions.list_journals(session))
        print(json.dumps([journal_as_json_dict(journal) for journal in journals]))
    finally:
        session.close()


def journals_get_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals get" subcommand.
    """
    session = SessionLocal()
    try:
        journal, entries = asyncio.run(
            actions.get_journal_entries(session, args.key)
        )
        journal_json = journal_as_json_dict(journal)
        journal_json["entries"] = entries_as_json_dict(entries)
        print(json.dumps(journal_json))
    except (actions.InvalidShareKey, actions.JournalNotFound) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        session.close()


def journals_delete_handler(args: argparse.Namespace) -> None:
    """
    Handler for "journals delete" subcommand.
    """
    session = SessionLocal()
    try:
        asyncio.run(actions.delete_journal(session, args.key))
        print(json.dumps({"share_key": args.key, "deleted": True}))
    except (actions.InvalidShareKey, actions.JournalNotFound) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        session.close()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Administrative actions for shared journals"
    )
    parser.set_defaults(func=lambda _: parser.print_help())
    subcommands = parser.add_subparsers(description="Shared journals commands")

    parser_journals = subcommands.add_parser("journals", description="Shared journals")
    parser_journals.set_defaults(func=lambda _: parser_journals.print_help())
    subcommands_journals = parser_journals.add_subparsers(
        description="Journal commands"
    )

    parser_journals_list = subcommands_journals.add_parser(
        "list", description="List all shared journals"
    )
    parser_journals_list.set_defaults(func=journals_list_handler)

    parser_journals_get = subcommands_journals.add_parser(
        "get", description="Get journal with its entries"
    )
    parser_journals_get.add_argument("-k", "--key", required=True, help="Share key")
    parser_journals_get.set_defaults(func=journals_get_handler)

    parser_journals_delete = subcommands_journals.add_parser(
        "delete", description="Delete journal and all its entries"
    )
    parser_journals_delete.add_argument(
        "-k", "--key", required=True, help="Share key"
    )
    parser_journals_delete.set_defaults(func=journals_delete_handler)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
