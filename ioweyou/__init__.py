from .errors import (
    ContractRevertError,
    IOUNotFoundError,
    IOweYouError,
    NotPartyError,
    SelfIOUError,
)
from .iou import IOU, IOUState, IOweYou
from .local import LocalChain

__all__ = [
    "IOU",
    "IOUState",
    "IOweYou",
    "LocalChain",
    "IOweYouError",
    "ContractRevertError",
    "SelfIOUError",
    "NotPartyError",
    "IOUNotFoundError",
]
