"""Command-line interface for the after-school lessons API using argparse."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional, Sequence


def _print_lessons(lessons: List[Dict[str, Any]]) -> None:
    if not lessons:
        print("No lessons.")
        return
    print(f"{'ID':<26} {'Subject':<12} {'Location':<12} {'Price':>7} {'Spaces':>7}")
    print("-" * 68)
    for l in lessons:
        print(
            f"{l['_id']:<26} {l['subject'][:12]:<12} {l['location'][:12]:<12} "
            f"{l['price']:>7} {l['spaces']:>7}"
        )


def _client(args: argparse.Namespace) -> "AfterschoolClient":  # noqa: F821
    from afterschool.client import AfterschoolClient

    return AfterschoolClient(url=args.api_url)


async def _call(args: argparse.Namespace, method: str, *call_args: Any, **call_kwargs: Any) -> Any:
    from afterschool.client import ApiError

    async with _client(args) as client:
        try:
            return await getattr(client, method)(*call_args, **call_kwargs)
        except ApiError as exc:
            print(f"Error {exc.status_code}: {exc.error}: {exc.message}", file=sys.stderr)
            sys.exit(1)


# ── Server-side commands ───────────────────────────────────────────


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from afterschool.server.config import settings

    if args.memory:
        from afterschool.seed import seed_lessons
        from afterschool.server.app import create_app
        from afterschool.store.memory import MemoryStore

        store = MemoryStore()
        asyncio.run(seed_lessons(store))
        target: Any = create_app(store=store)
    else:
        target = "afterschool.server.app:app"

    uvicorn.run(
        target,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )


async def _seed(uri: str, db_name: str, timeout_ms: int) -> int:
    from afterschool.seed import seed_lessons
    from afterschool.store.mongo import MongoStore

    store = await MongoStore.connect(uri, db_name, timeout_ms)
    try:
        report = await seed_lessons(store)
    finally:
        await store.close()
    return len(report.inserted_ids)


def cmd_seed(args: argparse.Namespace) -> None:
    from afterschool.exceptions import StartupError
    from afterschool.server.config import settings

    try:
        count = asyncio.run(
            _seed(args.uri or settings.mongodb_uri, args.db or settings.db_name,
                  settings.mongo_timeout_ms)
        )
    except StartupError as exc:
        print(f"Error seeding database: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Inserted {count} lessons")


# ── Client commands ────────────────────────────────────────────────


def cmd_lessons(args: argparse.Namespace) -> None:
    lessons = asyncio.run(_call(args, "list_lessons"))
    if args.json:
        print(json.dumps(lessons, indent=2))
    else:
        _print_lessons(lessons)


def cmd_search(args: argparse.Namespace) -> None:
    lessons = asyncio.run(_call(args, "search", args.query))
    if args.json:
        print(json.dumps(lessons, indent=2))
    else:
        _print_lessons(lessons)


def cmd_order(args: argparse.Namespace) -> None:
    result = asyncio.run(
        _call(args, "create_order", args.name, args.phone, args.lesson, args.spaces)
    )
    print(result["orderId"])


def cmd_set_spaces(args: argparse.Namespace) -> None:
    modified = asyncio.run(_call(args, "set_spaces", args.lesson_id, args.spaces))
    print(f"Lesson {args.lesson_id} updated ({modified} modified)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="afterschool",
        description="After-school lessons API server and client",
    )
    parser.add_argument(
        "--api-url", default=None, help="API URL for client commands (or AFTERSCHOOL_URL)"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    p = sub.add_parser("serve", help="Run the HTTP server")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    p.add_argument(
        "--memory", action="store_true", help="Use a seeded in-memory store instead of MongoDB"
    )

    # seed
    p = sub.add_parser("seed", help="Replace the lessons collection with the seed catalogue")
    p.add_argument("--uri", default=None, help="MongoDB URI (or MONGODB_URI)")
    p.add_argument("--db", default=None, help="Database name (or DB_NAME)")

    # lessons
    p = sub.add_parser("lessons", help="List all lessons")
    p.add_argument("--json", action="store_true")

    # search
    p = sub.add_parser("search", help="Search lessons")
    p.add_argument("query", help="Search text")
    p.add_argument("--json", action="store_true")

    # order
    p = sub.add_parser("order", help="Place an order")
    p.add_argument("--name", required=True)
    p.add_argument("--phone", required=True)
    p.add_argument("--lesson", action="append", required=True, help="Lesson ID (repeatable)")
    p.add_argument("--spaces", type=int, required=True)

    # set-spaces
    p = sub.add_parser("set-spaces", help="Set a lesson's available spaces")
    p.add_argument("lesson_id")
    p.add_argument("spaces", type=int)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    handlers = {
        "serve": cmd_serve,
        "seed": cmd_seed,
        "lessons": cmd_lessons,
        "search": cmd_search,
        "order": cmd_order,
        "set-spaces": cmd_set_spaces,
    }
    handlers[args.command](args)


if __name__ == "__main__":
    main()
