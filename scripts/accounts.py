"""Prints the list of accounts, with their reverse (ENS) names where the network has a registry."""

import logging

from ioweyou.config import LOG_LEVEL, active_network, get_network, reverse_registry_for
from ioweyou.eth_client import get_w3
from ioweyou.reverse_records import names_for


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    w3 = get_w3(get_network().url)
    accounts = list(w3.eth.accounts)
    for account, name in zip(accounts, names_for(w3, reverse_registry_for(active_network()), accounts)):
        if name == account.lower():
            print(account)
        else:
            print(f"{account}  {name}")


if __name__ == "__main__":
    main()
