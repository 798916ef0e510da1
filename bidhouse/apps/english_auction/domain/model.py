"""
English auction domain model types
"""

from typing import NewType

from ulid import ULID

# Participant identity, i.e., the account that bids and receives transfers
Address = NewType("Address", str)


class AuctionId(ULID):
    """
    Unique auction ID
    """

    def __hash__(self):
        return self.bytes.__hash__()
