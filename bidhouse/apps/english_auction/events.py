"""
Auction event notifications

Events are fire-and-forget. They are published after the operation that produced them has fully succeeded.
"""

from dataclasses import dataclass
from typing import ClassVar, Self

import msgpack  # type: ignore

from bidhouse.apps.english_auction.domain.model import Address
from bidhouse.core.message import MessageType, Serializable


@dataclass(slots=True, frozen=True)
class NewLeadingBid(Serializable):
    """
    Published once per accepted bid
    """

    MSG_TYPE: ClassVar[MessageType] = MessageType.from_str(
        "01HAY9Q1ZB4T7N6W1F3K2D5E8R"
    )

    bidder: Address
    amount: int

    @classmethod
    def message_type(cls) -> MessageType:
        return cls.MSG_TYPE

    def pack(self) -> bytes:
        return msgpack.packb((self.bidder, self.amount))

    @classmethod
    def unpack(cls, packed: bytes) -> Self:
        (bidder, amount) = msgpack.unpackb(packed, use_list=False)
        return cls(bidder=Address(bidder), amount=amount)


@dataclass(slots=True, frozen=True)
class AuctionClosed(Serializable):
    """
    Published once the auction has been settled, including when there were no bids
    """

    MSG_TYPE: ClassVar[MessageType] = MessageType.from_str(
        "01HAY9Q1ZB4T7N6W1F3K2D5E8S"
    )

    @classmethod
    def message_type(cls) -> MessageType:
        return cls.MSG_TYPE

    def pack(self) -> bytes:
        return msgpack.packb(None)

    @classmethod
    def unpack(cls, packed: bytes) -> Self:
        msgpack.unpackb(packed)
        return cls()


AuctionEvent = NewLeadingBid | AuctionClosed
