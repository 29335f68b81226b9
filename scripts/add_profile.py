#!/usr/bin/env python3
"""
Seed a reward profile for a tag (profiles have no HTTP creation endpoint).

Usage:
  python scripts/add_profile.py --tag-id abc123 --name "Alice" --wallet GABC... \
      [--avatar https://...] [--referrer def456 ...]
"""
from __future__ import annotations

import argparse
import sys

from tagwallet.db.create_tables import create_all
from tagwallet.repositories.sql_repository import SQLRepository


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a reward profile")
    ap.add_argument("--tag-id", required=True, help="NFC tag id (ex.: abc123)")
    ap.add_argument("--name", default="", help="Display name")
    ap.add_argument("--wallet", default="", help="Wallet address")
    ap.add_argument("--avatar", default="", help="Avatar URL")
    ap.add_argument(
        "--referrer",
        action="append",
        default=[],
        help="Referrer tag id; repeat for the chain, direct referrer first",
    )
    args = ap.parse_args()

    create_all()
    repo = SQLRepository()
    tag_id = (args.tag_id or "").strip()
    if not tag_id:
        raise SystemExit("Invalid tag id")
    if repo.get_reward_profile(tag_id):
        raise SystemExit(f"Tag '{tag_id}' already has a profile")
    referrals = [r.strip() for r in args.referrer if r.strip()]
    if tag_id in referrals:
        raise SystemExit("A tag cannot refer itself")
    missing = [r for r in referrals[:1] if not repo.get_reward_profile(r)]
    if missing:
        print(f"Warning: referrer '{missing[0]}' has no profile yet; bonuses are skipped until it exists")

    repo.create_reward_profile(
        tag_id,
        name=args.name.strip(),
        wallet_address=args.wallet.strip(),
        avatar=args.avatar.strip(),
        referrals=referrals,
    )
    print("OK: profile created")
    print(f"  Tag: {tag_id}")
    if referrals:
        print(f"  Referrals: {', '.join(referrals)}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
