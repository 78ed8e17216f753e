#!/usr/bin/env python3
"""
Manage users of a running User API from the command line.

Examples:
    python manage_users.py create --name "Alice Johnson" --email alice@example.com
    python manage_users.py list --limit 10 --offset 0
    python manage_users.py get 1
    python manage_users.py update 1 --email alice.smith@example.com
    python manage_users.py delete 1

The server URL defaults to ``USER_API_URL`` or ``http://localhost:8000``.
Results are printed as JSON; errors go to stderr and exit with status 1.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

from user_api_client import UserAPIClient


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage users through the User API.")
    ap.add_argument(
        "--url",
        default=os.getenv("USER_API_URL", "http://localhost:8000"),
        help="Base URL of the server (default: $USER_API_URL or http://localhost:8000)",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a user")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)

    get = sub.add_parser("get", help="Show one user")
    get.add_argument("user_id", type=int)

    list_cmd = sub.add_parser("list", help="List users")
    list_cmd.add_argument("--limit", type=int)
    list_cmd.add_argument("--offset", type=int)

    update = sub.add_parser("update", help="Change a user's name and/or email")
    update.add_argument("user_id", type=int)
    update.add_argument("--name")
    update.add_argument("--email")

    delete = sub.add_parser("delete", help="Delete a user")
    delete.add_argument("user_id", type=int)

    return ap


def main(argv: Optional[List[str]] = None, client: Optional[UserAPIClient] = None) -> int:
    args = build_parser().parse_args(argv)
    client = client or UserAPIClient(base_url=args.url)

    if args.command == "create":
        data, error = client.create_user(args.name, args.email)
    elif args.command == "get":
        data, error = client.get_user(args.user_id)
    elif args.command == "list":
        data, error = client.list_users(limit=args.limit, offset=args.offset)
    elif args.command == "update":
        if args.name is None and args.email is None:
            print("[!] Nothing to update: pass --name and/or --email.", file=sys.stderr)
            return 1
        data, error = client.update_user(args.user_id, name=args.name, email=args.email)
    else:
        deleted, error = client.delete_user(args.user_id)
        data = {"deleted": args.user_id} if deleted else None

    if error:
        code = f" [{error['code']}]" if error.get("code") else ""
        print(f"[!] {error['message']}{code}", file=sys.stderr)
        return 1

    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
