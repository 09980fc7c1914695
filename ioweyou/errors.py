from typing import Optional, Type


class IOweYouError(Exception):
    pass


class ConfigError(IOweYouError):
    pass


class TransactionFailedError(IOweYouError):
    """Transaction was mined but its receipt reports status 0."""

    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction failed: {tx_hash}")
        self.tx_hash = tx_hash


class ContractRevertError(IOweYouError):
    """A contract call reverted. ``reason`` is the revert string, verbatim."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SelfIOUError(ContractRevertError):
    pass


class NotPartyError(ContractRevertError):
    pass


class IOUNotFoundError(ContractRevertError):
    pass


class NonexistentTokenError(ContractRevertError):
    pass


class IndexOutOfBoundsError(ContractRevertError):
    pass


class NotOwnerError(ContractRevertError):
    pass


class InvalidAddressError(ContractRevertError):
    pass


SELF_IOU = "You cannot make an IOU to yourself."
NOT_PARTY = "You can only complete your own IOU"
IOU_NOT_FOUND = "IOU does not exist."
URI_NONEXISTENT = "ERC721Metadata: URI query for nonexistent token"
OWNER_NONEXISTENT = "ERC721: owner query for nonexistent token"
BALANCE_ZERO_ADDRESS = "ERC721: balance query for the zero address"
MINT_ZERO_ADDRESS = "ERC721: mint to the zero address"
OWNER_INDEX = "ERC721Enumerable: owner index out of bounds"
GLOBAL_INDEX = "ERC721Enumerable: global index out of bounds"
CREATOR_INDEX = "IOweYou: creator index out of bounds"
NOT_OWNER = "Ownable: caller is not the owner"
NOT_A_CONTRACT = "IOweYou: token URI address is not a contract"

# Matched by substring, so longer reasons go first where they overlap.
_REASONS = (
    (SELF_IOU, SelfIOUError),
    (NOT_PARTY, NotPartyError),
    (IOU_NOT_FOUND, IOUNotFoundError),
    (URI_NONEXISTENT, NonexistentTokenError),
    (OWNER_NONEXISTENT, NonexistentTokenError),
    (BALANCE_ZERO_ADDRESS, InvalidAddressError),
    (MINT_ZERO_ADDRESS, InvalidAddressError),
    (NOT_A_CONTRACT, InvalidAddressError),
    (OWNER_INDEX, IndexOutOfBoundsError),
    (GLOBAL_INDEX, IndexOutOfBoundsError),
    (CREATOR_INDEX, IndexOutOfBoundsError),
    (NOT_OWNER, NotOwnerError),
)


def revert_error_for(reason: Optional[str]) -> ContractRevertError:
    """Build the most specific revert error for a reason string."""
    text = reason or ""
    cls: Type[ContractRevertError] = ContractRevertError
    for known, known_cls in _REASONS:
        if known in text:
            cls = known_cls
            break
    return cls(text)
