import unittest

from bidhouse.apps.english_auction.domain.bid import Bid, BidLedger
from tests.test_support import ALICE, BOB, START_TIME


class BidLedgerTestCase(unittest.TestCase):
    def test_empty_ledger(self):
        ledger = BidLedger()
        self.assertFalse(ledger)
        self.assertEqual(0, len(ledger))
        self.assertIsNone(ledger.last)
        self.assertEqual((), ledger.bids)

    def test_append(self):
        ledger = BidLedger()
        first = Bid(bidder=ALICE, amount=106, placed_at=START_TIME)
        second = Bid(bidder=BOB, amount=112, placed_at=START_TIME)
        ledger.append(first)
        ledger.append(second)

        self.assertTrue(ledger)
        self.assertEqual(2, len(ledger))
        self.assertEqual(second, ledger.last)
        self.assertEqual((first, second), ledger.bids)
        self.assertEqual([first, second], list(ledger))


if __name__ == "__main__":
    unittest.main()
