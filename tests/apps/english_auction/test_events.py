import logging
import threading
import unittest
from datetime import timedelta

from bidhouse.apps.english_auction.auction import EnglishAuction
from bidhouse.apps.english_auction.domain.config import AuctionConfig
from bidhouse.apps.english_auction.events import AuctionClosed, NewLeadingBid
from bidhouse.core.message import Message
from bidhouse.core.rx import threadpool_scheduler
from tests.test_support import ALICE, BOB, OWNER, BidHouseTestCase


class EventSerializationTestCase(unittest.TestCase):
    def test_new_leading_bid(self):
        event = NewLeadingBid(bidder=ALICE, amount=106)
        msg = Message.unpack(event.to_message().pack())
        self.assertEqual(NewLeadingBid.MSG_TYPE, msg.msg_type)
        self.assertEqual(event, NewLeadingBid.from_message(msg))

    def test_auction_closed(self):
        msg = Message.unpack(AuctionClosed().to_message().pack())
        self.assertEqual(AuctionClosed(), AuctionClosed.from_message(msg))

    def test_message_types_are_distinct(self):
        self.assertNotEqual(NewLeadingBid.MSG_TYPE, AuctionClosed.MSG_TYPE)
        with self.assertRaises(ValueError):
            AuctionClosed.from_message(NewLeadingBid(ALICE, 106).to_message())


class EventDeliveryTestCase(BidHouseTestCase):
    def test_events_as_packed_messages(self):
        auction = self.create_auction()
        outbox: list[bytes] = []
        auction.events.subscribe(
            lambda event: outbox.append(event.to_message().pack())
        )
        auction.bid(ALICE, 106)
        self.close_auction(auction)
        auction.settle(OWNER)

        self.assertEqual(2, len(outbox))
        first, second = (Message.unpack(packed) for packed in outbox)
        self.assertEqual(NewLeadingBid.MSG_TYPE, first.msg_type)
        self.assertEqual(
            NewLeadingBid(bidder=ALICE, amount=106), NewLeadingBid.from_message(first)
        )
        self.assertEqual(AuctionClosed.MSG_TYPE, second.msg_type)
        self.assertEqual(AuctionClosed(), AuctionClosed.from_message(second))
        self.assertNotEqual(first.msg_id, second.msg_id)

    def test_events_on_scheduler(self):
        auction = EnglishAuction(
            owner=OWNER,
            config=AuctionConfig(starting_floor=100, duration=timedelta(hours=1)),
            escrow=self.escrow,
            clock=self.clock,
            scheduler=threadpool_scheduler(max_workers=1),
        )
        logger = self.get_logger("test_events_on_scheduler")
        events = []
        closed = threading.Event()

        def on_event(event):
            logger.info("event: %s", event)
            events.append(event)
            if isinstance(event, AuctionClosed):
                closed.set()

        auction.events.subscribe(on_event)
        auction.bid(ALICE, 106)
        auction.bid(BOB, 112)
        self.close_auction(auction)
        auction.settle(OWNER)

        self.assertTrue(closed.wait(timeout=5))
        self.assertEqual(
            [
                NewLeadingBid(bidder=ALICE, amount=106),
                NewLeadingBid(bidder=BOB, amount=112),
                AuctionClosed(),
            ],
            events,
        )

    def test_failing_subscriber_does_not_fail_operations(self):
        auction = self.create_auction()
        events = []

        def fail(event):
            raise RuntimeError(f"subscriber failed: {event}")

        auction.events.subscribe(events.append)
        auction.events.subscribe(fail)

        with self.assertLogs("EnglishAuction", level=logging.ERROR):
            bid = auction.bid(ALICE, 106)
        self.assertEqual(ALICE, bid.bidder)
        self.assertEqual(106, bid.amount)
        self.assertEqual((bid,), auction.bids)
        self.assertEqual(106, self.escrow.balance)

        self.close_auction(auction)
        with self.assertLogs("EnglishAuction", level=logging.ERROR):
            report = auction.settle(OWNER)
        self.assertTrue(auction.settled)
        self.assertEqual(ALICE, report.winner)
        self.assertEqual(106, report.owner_sweep)
        self.assertEqual(106, self.escrow.credited(OWNER))
        self.assertEqual(
            [NewLeadingBid(bidder=ALICE, amount=106), AuctionClosed()],
            events,
        )


if __name__ == "__main__":
    unittest.main()
