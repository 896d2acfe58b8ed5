#!/usr/bin/env python3
"""
Register a user directly against the configured DATABASE_URL.

Usage:
  python scripts/add_user.py --username johndoe --email john@example.com [--first-name John] [--last-name Doe]
"""
from __future__ import annotations

import argparse
import sys
from typing import Sequence

from pydantic import ValidationError

from home_service.domain.errors import DuplicateResourceError
from home_service.schemas.users import UserRequest
from home_service.services.user_service import UserService


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Register a user")
    ap.add_argument("--username", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--first-name")
    ap.add_argument("--last-name")
    args = ap.parse_args(argv)

    try:
        request = UserRequest(
            username=args.username,
            email=args.email,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except ValidationError as exc:
        sys.stderr.write(f"Invalid input: {exc}\n")
        return 2

    try:
        user = UserService().create_user(request)
    except DuplicateResourceError as exc:
        sys.stderr.write(f"{exc.message}\n")
        return 1

    print("OK: user created")
    print(f"  id: {user.id}")
    print(f"  username: {user.username}")
    print(f"  email: {user.email}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
