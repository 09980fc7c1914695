#!/usr/bin/env python
"""
export_ious.py

Write the IOUs held by (or created by) an address to CSV.

Tokens created by an address stay enumerable after they are burned; those
rows are written with status "burned" and empty IOU fields.

Usage:
    python scripts/export_ious.py --owner 0x... --out ious.csv
    python scripts/export_ious.py --creator 0x...
"""

import argparse
import csv
import logging
from pathlib import Path

from ioweyou.config import LOG_LEVEL
from ioweyou.errors import IOUNotFoundError
from ioweyou.eth_client import IOweYouClient

FIELDS = ["token_id", "status", "owed", "creator", "receiver", "creator_completed", "receiver_completed", "token_uri"]


def iou_row(client: IOweYouClient, token_id: int) -> dict:
    try:
        iou = client.get_iou(token_id)
    except IOUNotFoundError:
        return {"token_id": token_id, "status": "burned"}

    return {
        "token_id": token_id,
        "status": "open",
        "owed": iou.owed,
        "creator": iou.creator,
        "receiver": iou.receiver,
        "creator_completed": iou.creator_completed,
        "receiver_completed": iou.receiver_completed,
        "token_uri": client.token_uri(token_id),
    }


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser()
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--owner", type=str, help="Export IOUs currently owned by this address.")
    group.add_argument("--creator", type=str, help="Export every IOU created by this address.")
    parser.add_argument("--network", type=str, default=None, help="Network name (defaults to IOWEYOU_NETWORK).")
    parser.add_argument("--out", type=str, default="ious.csv", help="Output CSV path.")
    args = parser.parse_args()

    client = IOweYouClient.from_config(args.network)
    if args.owner:
        token_ids = list(client.tokens_of_owner(args.owner))
    else:
        token_ids = list(client.tokens_of_creator(args.creator))

    print(f"[INFO] Found {len(token_ids)} token(s)")

    out_csv = Path(args.out)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for token_id in token_ids:
            writer.writerow(iou_row(client, token_id))

    print(f"[OK] Wrote: {out_csv}")


if __name__ == "__main__":
    main()
