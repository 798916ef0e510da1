import unittest

from bidhouse.apps.english_auction.errors import (
    AuctionNotSuspendedError,
    TransferFailedError,
    UnauthorizedError,
)
from tests.test_support import ALICE, BOB, OWNER, BidHouseTestCase


class SuspensionTestCase(BidHouseTestCase):
    def test_suspend_resume(self):
        auction = self.create_auction()
        auction.suspend(OWNER)
        self.assertTrue(auction.suspended)
        # suspending twice is harmless
        auction.suspend(OWNER)
        self.assertTrue(auction.suspended)
        auction.resume(OWNER)
        self.assertFalse(auction.suspended)

    def test_only_owner_can_suspend(self):
        auction = self.create_auction()
        with self.assertRaises(UnauthorizedError):
            auction.suspend(ALICE)
        self.assertFalse(auction.suspended)

        auction.suspend(OWNER)
        with self.assertRaises(UnauthorizedError):
            auction.resume(ALICE)
        self.assertTrue(auction.suspended)


class EmergencyWithdrawTestCase(BidHouseTestCase):
    def test_emergency_withdraw(self):
        auction = self.create_auction()
        auction.bid(ALICE, 106)
        auction.bid(BOB, 112)
        auction.suspend(OWNER)

        self.assertEqual(218, auction.emergency_withdraw(OWNER))

        self.assertEqual(0, self.escrow.balance)
        self.assertEqual(218, self.escrow.credited(OWNER))
        # bidder accounting is bypassed
        self.assertEqual(106, auction.participant(ALICE).total_deposited)
        self.assertEqual(112, auction.participant(BOB).total_deposited)
        self.assertEqual((ALICE, BOB), auction.bidders)
        self.assertEqual(2, len(auction.bids))

    def test_requires_suspension(self):
        auction = self.create_auction()
        auction.bid(ALICE, 106)
        with self.assertRaises(AuctionNotSuspendedError):
            auction.emergency_withdraw(OWNER)
        self.assertEqual(106, self.escrow.balance)

    def test_requires_owner(self):
        auction = self.create_auction()
        auction.bid(ALICE, 106)
        auction.suspend(OWNER)
        with self.assertRaises(UnauthorizedError):
            auction.emergency_withdraw(ALICE)
        self.assertEqual(106, self.escrow.balance)

    def test_failed_transfer(self):
        auction = self.create_auction()
        auction.bid(ALICE, 106)
        auction.suspend(OWNER)
        self.escrow.reject_transfers_to(OWNER)
        with self.assertRaises(TransferFailedError):
            auction.emergency_withdraw(OWNER)
        self.assertEqual(106, self.escrow.balance)

    def test_allowed_after_deadline(self):
        auction = self.create_auction()
        auction.bid(ALICE, 106)
        self.close_auction(auction)
        auction.suspend(OWNER)
        self.assertEqual(106, auction.emergency_withdraw(OWNER))


if __name__ == "__main__":
    unittest.main()
