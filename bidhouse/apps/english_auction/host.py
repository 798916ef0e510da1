"""
Hosting environment collaborators: the clock and the escrow that custodies bid funds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any

from bidhouse.apps.english_auction.domain.model import Address
from bidhouse.core.logging import get_logger


class Clock(ABC):
    """
    Current time source. Time must never go backwards.
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        :return: timezone aware current time
        """


class SystemClock(Clock):
    """
    Wall clock time in UTC
    """

    def now(self) -> datetime:
        return datetime.now(UTC)


class Escrow(ABC):
    """
    Holds the value sent with bids and moves it out on request.

    Transfers are atomic per call, i.e., they either move the full amount or nothing.
    `snapshot` and `restore` delimit the host's atomic call boundary: the auction restores the snapshot when an
    operation fails after funds were moved, which makes the whole operation a no-op.
    """

    @property
    @abstractmethod
    def balance(self) -> int:
        """
        :return: value currently held in custody
        """

    @abstractmethod
    def receive(self, sender: Address, amount: int):
        """
        Takes custody of value sent along with a bid
        """

    @abstractmethod
    def transfer(self, receiver: Address, amount: int) -> bool:
        """
        :return: True if the full amount was transferred to the receiver
        """

    @abstractmethod
    def snapshot(self) -> Any:
        """
        :return: opaque state that can be passed to `restore`
        """

    @abstractmethod
    def restore(self, snapshot: Any):
        """
        Reverts the escrow to the snapshot state
        """


@dataclass(slots=True)
class _EscrowState:
    balance: int = 0
    # value transferred out, per receiver
    credits: dict[Address, int] = field(default_factory=dict)
    # value received with bids, per sender
    debits: dict[Address, int] = field(default_factory=dict)

    def copy(self) -> "_EscrowState":
        return _EscrowState(
            balance=self.balance,
            credits=dict(self.credits),
            debits=dict(self.debits),
        )


class InMemoryEscrow(Escrow):
    """
    Escrow that keeps its books in memory.

    Receivers can be configured to reject transfers, which simulates a receiving account that refuses funds.
    """

    def __init__(self):
        self._state = _EscrowState()
        self._rejecting: set[Address] = set()
        self._logger = get_logger(self)

    @property
    def balance(self) -> int:
        return self._state.balance

    def credited(self, receiver: Address) -> int:
        """
        :return: total value transferred to the receiver
        """
        return self._state.credits.get(receiver, 0)

    def debited(self, sender: Address) -> int:
        """
        :return: total value received from the sender
        """
        return self._state.debits.get(sender, 0)

    def deposit(self, amount: int):
        """
        Value arriving outside of bidding, e.g., a direct payment to the escrow account
        """
        if amount < 0:
            raise ValueError("amount must not be negative")
        self._state.balance += amount

    def receive(self, sender: Address, amount: int):
        if amount < 0:
            raise ValueError("amount must not be negative")
        self._state.balance += amount
        self._state.debits[sender] = self._state.debits.get(sender, 0) + amount

    def transfer(self, receiver: Address, amount: int) -> bool:
        if amount < 0:
            raise ValueError("amount must not be negative")
        if receiver in self._rejecting:
            self._logger.warning("receiver rejected transfer: %s", receiver)
            return False
        if amount > self._state.balance:
            self._logger.warning(
                "insufficient balance to transfer %s to %s: %s",
                amount,
                receiver,
                self._state.balance,
            )
            return False
        self._state.balance -= amount
        self._state.credits[receiver] = self._state.credits.get(receiver, 0) + amount
        return True

    def reject_transfers_to(self, receiver: Address):
        """
        Transfers to the receiver will fail until `accept_transfers_to` is called
        """
        self._rejecting.add(receiver)

    def accept_transfers_to(self, receiver: Address):
        """
        Clears a previous `reject_transfers_to`
        """
        self._rejecting.discard(receiver)

    def snapshot(self) -> _EscrowState:
        return self._state.copy()

    def restore(self, snapshot: _EscrowState):
        self._state = snapshot.copy()
