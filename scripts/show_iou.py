import logging
import sys

from ioweyou.config import LOG_LEVEL
from ioweyou.errors import IOUNotFoundError
from ioweyou.eth_client import IOweYouClient


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    if len(sys.argv) != 2 or not sys.argv[1].isdigit():
        print("Usage: python scripts/show_iou.py <tokenId>")
        sys.exit(1)

    token_id = int(sys.argv[1])
    client = IOweYouClient.from_config()

    try:
        iou = client.get_iou(token_id)
    except IOUNotFoundError:
        print(f"IOU #{token_id} does not exist (never minted, or completed and burned).")
        sys.exit(0)

    print(f"IOU #{token_id}")
    print(f"  owed               : {iou.owed}")
    print(f"  creator            : {client.addr_to_string(iou.creator)}")
    print(f"  receiver           : {client.addr_to_string(iou.receiver)}")
    print(f"  creator completed  : {iou.creator_completed}")
    print(f"  receiver completed : {iou.receiver_completed}")
    print(f"  token URI          : {client.token_uri(token_id)}")


if __name__ == "__main__":
    main()
