"""
English auction engine
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from reactivex import Observable, Subject
from reactivex.abc import SchedulerBase
from reactivex.operators import observe_on

from bidhouse.apps.english_auction.domain.auction_status import AuctionPhase
from bidhouse.apps.english_auction.domain.bid import Bid, BidLedger
from bidhouse.apps.english_auction.domain.config import AuctionConfig
from bidhouse.apps.english_auction.domain.model import Address, AuctionId
from bidhouse.apps.english_auction.domain.participant import (
    BidderRegistry,
    Participant,
)
from bidhouse.apps.english_auction.errors import (
    AlreadySettledError,
    AuctionClosedError,
    AuctionNotSuspendedError,
    AuctionStillActiveError,
    AuctionSuspendedError,
    BidTooLowError,
    NoBidsError,
    TransferFailedError,
    UnauthorizedError,
)
from bidhouse.apps.english_auction.events import (
    AuctionClosed,
    AuctionEvent,
    NewLeadingBid,
)
from bidhouse.apps.english_auction.host import Clock, Escrow, SystemClock
from bidhouse.apps.english_auction.settlement import (
    Payout,
    SettlementReport,
    compute_payout,
)
from bidhouse.core.logging import get_logger


class EnglishAuction:
    """
    Ascending auction for a single lot, with an anti-sniping deadline extension and discounted settlement.

    Bidding
    -------
    - each bid must be strictly greater than the running maximum increased by `bid_increase_pct` (truncated)
    - the value sent with a bid is added to the bidder's deposits - nothing is refunded automatically
    - a bid placed within `extension_window` of the deadline pushes the deadline out by `extension_window`
    - while bidding is open, bidders may claim back deposits that exceed their current offer

    Settlement
    ----------
    Once the deadline has passed, the owner settles the auction:
    - losers are refunded their deposits, less the return discount
    - the winner is refunded deposits above the winning bid, less the return discount
    - whatever remains in escrow is transferred to the owner

    Suspension
    ----------
    The owner may suspend the auction at any time, which blocks bids, surplus claims and settlement.
    While suspended, the owner may make an emergency withdrawal of all escrowed funds.

    Atomicity
    ---------
    Operations either fully succeed or leave no trace. Operations that move funds out of escrow run inside an
    atomic unit: if a transfer fails, bidder accounting and the escrow are restored to their prior state.

    The engine is not thread safe. The host must run one operation at a time.
    """

    # pylint: disable=too-many-instance-attributes

    def __init__(
        self,
        owner: Address,
        config: AuctionConfig,
        escrow: Escrow,
        clock: Clock | None = None,
        scheduler: SchedulerBase | None = None,
    ):
        """
        The deadline is set to the clock's current time plus the configured duration.

        :param owner: seller who settles the auction and receives the proceeds
        :param scheduler: if specified, events are delivered on the scheduler, otherwise they are delivered
                          synchronously on the caller's thread
        """
        self._auction_id = AuctionId()
        self._owner = owner
        self._config = config
        self._escrow = escrow
        self._clock = clock if clock else SystemClock()

        self._deadline = self._clock.now() + config.duration
        self._highest_amount = config.starting_floor
        self._registry = BidderRegistry()
        self._ledger = BidLedger()
        self._suspended = False
        self._settled = False

        self._logger = get_logger(self, str(self._auction_id))

        self._events_subject: Subject[AuctionEvent] = Subject()
        self._events_observable: Observable[AuctionEvent] = (
            self._events_subject.pipe(observe_on(scheduler))
            if scheduler
            else self._events_subject
        )

    @property
    def auction_id(self) -> AuctionId:
        return self._auction_id

    @property
    def owner(self) -> Address:
        return self._owner

    @property
    def config(self) -> AuctionConfig:
        return self._config

    @property
    def escrow(self) -> Escrow:
        return self._escrow

    @property
    def deadline(self) -> datetime:
        """
        Bidding is open up to and including the deadline
        """
        return self._deadline

    @property
    def highest_amount(self) -> int:
        """
        :return: the leading bid amount, or the starting floor if no bids have been placed
        """
        return self._highest_amount

    @property
    def min_bid(self) -> int:
        """
        :return: the smallest amount the next bid may be
        """
        return self._config.min_bid(self._highest_amount)

    @property
    def bids(self) -> tuple[Bid, ...]:
        """
        :return: accepted bids in chronological order
        """
        return self._ledger.bids

    @property
    def bidders(self) -> tuple[Address, ...]:
        """
        :return: registered bidders in order of first bid
        """
        return self._registry.bidders

    @property
    def leader(self) -> Address | None:
        """
        :return: the bidder of the last accepted bid
        """
        last = self._ledger.last
        return last.bidder if last else None

    @property
    def total_deposited(self) -> int:
        """
        :return: bidder deposits currently held in escrow
        """
        return self._registry.total_deposited()

    @property
    def suspended(self) -> bool:
        return self._suspended

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def events(self) -> Observable[AuctionEvent]:
        """
        NewLeadingBid and AuctionClosed events
        """
        return self._events_observable

    def participant(self, bidder: Address) -> Participant:
        """
        :return: copy of the bidder's record - unregistered bidders get an empty record
        """
        return self._registry.get(bidder)

    def phase(self, now: datetime | None = None) -> AuctionPhase:
        """
        :return: lifecycle phase at the specified time, which defaults to the clock's current time
        """
        if self._settled:
            return AuctionPhase.CLOSED_SETTLED
        if self._now(now) > self._deadline:
            return AuctionPhase.CLOSED_UNSETTLED
        return AuctionPhase.ACTIVE

    def bid(self, bidder: Address, amount: int, now: datetime | None = None) -> Bid:
        """
        Places a bid. The amount is the value sent along with the bid, which the escrow takes custody of.

        If the bid is placed within `extension_window` of the deadline, then the deadline is pushed out by
        `extension_window`.

        Publishes NewLeadingBid

        :exception AuctionClosedError: if the deadline has passed
        :exception AuctionSuspendedError: if the auction is suspended
        :exception BidTooLowError: if the amount does not exceed the running maximum by the required increase
        :exception TypeError: if the amount is not an int
        """
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError(f"bid amount must be an int: {amount!r}")
        now = self._now(now)
        self._require_active(now)
        self._require_not_suspended()
        min_bid = self._config.min_bid(self._highest_amount)
        if amount < min_bid:
            self._logger.warning(
                "bid rejected: bidder=%s amount=%s min_bid=%s", bidder, amount, min_bid
            )
            raise BidTooLowError(amount=amount, min_bid=min_bid)

        self._escrow.receive(bidder, amount)
        self._registry.record_bid(bidder, amount)
        bid = Bid(bidder=bidder, amount=amount, placed_at=now)
        self._ledger.append(bid)
        self._highest_amount = amount
        self._logger.info("new leading bid: bidder=%s amount=%s", bidder, amount)

        window = self._config.extension_window
        if now + window > self._deadline:
            self._deadline += window
            self._logger.info("deadline extended to %s", self._deadline.isoformat())

        self._publish(NewLeadingBid(bidder=bidder, amount=amount))
        return bid

    def claim_surplus(self, bidder: Address, now: datetime | None = None) -> int:
        """
        Transfers the bidder's deposits in excess of their current offer back to the bidder.
        Bidders who have not bid have no surplus, which is not an error.

        :return: amount transferred
        :exception AuctionClosedError: if the deadline has passed
        :exception AuctionSuspendedError: if the auction is suspended
        :exception TransferFailedError: if the transfer failed, in which case the bidder's deposits are unchanged
        """
        now = self._now(now)
        self._require_active(now)
        self._require_not_suspended()

        with self._atomic():
            surplus = self._registry.release_surplus(bidder)
            if surplus > 0:
                self._transfer(bidder, surplus)

        if surplus > 0:
            self._logger.info("surplus claimed: bidder=%s amount=%s", bidder, surplus)
        return surplus

    def reveal_winner(self, now: datetime | None = None) -> Bid:
        """
        :return: the winning bid
        :exception AuctionStillActiveError: if the deadline has not yet passed
        :exception NoBidsError: if no bids were placed
        """
        self._require_closed(self._now(now))
        winning_bid = self._ledger.last
        if winning_bid is None:
            raise NoBidsError()
        return winning_bid

    def settle(self, caller: Address, now: datetime | None = None) -> SettlementReport:
        """
        Refunds bidders in registration order, and then transfers the remaining escrow balance to the owner.
        If no bids were placed, then no funds are moved.

        The auction can only be settled once. If any transfer fails, the whole settlement is rolled back and
        may be retried.

        Publishes AuctionClosed

        :exception UnauthorizedError: if the caller is not the owner
        :exception AuctionStillActiveError: if the deadline has not yet passed
        :exception AuctionSuspendedError: if the auction is suspended
        :exception AlreadySettledError: if the auction has already been settled
        :exception TransferFailedError: if a transfer failed
        """
        now = self._now(now)
        self._require_owner(caller)
        self._require_closed(now)
        self._require_not_suspended()
        if self._settled:
            self._logger.warning("settlement rejected: already settled")
            raise AlreadySettledError()

        winning_bid = self._ledger.last
        with self._atomic():
            if winning_bid is None:
                report = SettlementReport(
                    winner=None,
                    winning_amount=0,
                    payouts=(),
                    owner_sweep=0,
                )
            else:
                payouts = tuple(
                    self._settle_bidder(bidder, winning_bid)
                    for bidder in self._registry.bidders
                )
                owner_sweep = self._escrow.balance
                if owner_sweep > 0:
                    self._transfer(self._owner, owner_sweep)
                report = SettlementReport(
                    winner=winning_bid.bidder,
                    winning_amount=winning_bid.amount,
                    payouts=payouts,
                    owner_sweep=owner_sweep,
                )
            self._settled = True

        self._logger.info(
            "auction settled: winner=%s winning_amount=%s owner_sweep=%s",
            report.winner,
            report.winning_amount,
            report.owner_sweep,
        )
        self._publish(AuctionClosed())
        return report

    def suspend(self, caller: Address):
        """
        Blocks bids, surplus claims and settlement until resumed.

        :exception UnauthorizedError: if the caller is not the owner
        """
        self._require_owner(caller)
        self._suspended = True
        self._logger.warning("auction suspended")

    def resume(self, caller: Address):
        """
        :exception UnauthorizedError: if the caller is not the owner
        """
        self._require_owner(caller)
        self._suspended = False
        self._logger.info("auction resumed")

    def emergency_withdraw(self, caller: Address) -> int:
        """
        Transfers the full escrow balance to the owner.

        This is an escape hatch that bypasses bidder accounting: bidder deposits are NOT updated, so after an
        emergency withdrawal the recorded deposits are no longer backed by escrowed funds.
        Refunds owed to bidders become the owner's responsibility.

        :return: amount transferred
        :exception UnauthorizedError: if the caller is not the owner
        :exception AuctionNotSuspendedError: if the auction is not suspended
        :exception TransferFailedError: if the transfer failed
        """
        self._require_owner(caller)
        if not self._suspended:
            raise AuctionNotSuspendedError()

        amount = self._escrow.balance
        with self._atomic():
            if amount > 0:
                self._transfer(self._owner, amount)
        self._logger.warning(
            "emergency withdrawal: amount=%s unbacked_deposits=%s",
            amount,
            self._registry.total_deposited(),
        )
        return amount

    def _settle_bidder(self, bidder: Address, winning_bid: Bid) -> Payout:
        is_winner = bidder == winning_bid.bidder
        participant = self._registry.close_out(bidder, clear_offer=not is_winner)
        payout = compute_payout(
            self._config,
            bidder,
            participant,
            winning_bid.bidder,
            winning_bid.amount,
        )
        if payout.amount > 0:
            self._transfer(bidder, payout.amount)
        self._logger.debug(
            "payout: bidder=%s refundable=%s amount=%s",
            bidder,
            payout.refundable,
            payout.amount,
        )
        return payout

    def _transfer(self, receiver: Address, amount: int):
        if not self._escrow.transfer(receiver, amount):
            self._logger.warning(
                "transfer failed: receiver=%s amount=%s", receiver, amount
            )
            raise TransferFailedError(receiver=receiver, amount=amount)

    def _publish(self, event: AuctionEvent):
        """
        Events are published after the operation has committed. Subscriber failures are logged and do not
        propagate back to the caller.
        """
        try:
            self._events_subject.on_next(event)
        except Exception:  # pylint: disable=broad-exception-caught
            self._logger.exception("event subscriber failed: %s", event)

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        """
        Restores bidder accounting, settlement status and the escrow if the block raises an exception.
        """
        registry = self._registry.copy()
        settled = self._settled
        escrow_snapshot = self._escrow.snapshot()
        try:
            yield
        except Exception:
            self._registry = registry
            self._settled = settled
            self._escrow.restore(escrow_snapshot)
            raise

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self._clock.now()

    def _require_active(self, now: datetime):
        if now > self._deadline:
            raise AuctionClosedError(deadline=self._deadline)

    def _require_closed(self, now: datetime):
        if now <= self._deadline:
            raise AuctionStillActiveError(deadline=self._deadline)

    def _require_not_suspended(self):
        if self._suspended:
            raise AuctionSuspendedError()

    def _require_owner(self, caller: Address):
        if caller != self._owner:
            self._logger.warning("unauthorized caller: %s", caller)
            raise UnauthorizedError(caller=caller)
