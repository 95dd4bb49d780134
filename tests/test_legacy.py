"""ParallelMarkets ID boolean-trait registry."""

import unittest

from parallelid import (
    ManualClock,
    NotFoundError,
    ParallelMarketsIDRegistry,
    TraitUpdated,
    UnauthorizedError,
)

DAY = 86400
T0 = 1_700_000_000

AUTHORITY = "0x" + "aa" * 20
RANDO = "0x" + "22" * 20


class TestParallelMarketsIDTraits(unittest.TestCase):

    def setUp(self):
        self.clock = ManualClock(T0)
        self.registry = ParallelMarketsIDRegistry(authority=AUTHORITY, expiry_window=90 * DAY, clock=self.clock)
        self.events = []
        self.registry.events.subscribe(self.events.append)

    def test_initialized_correctly(self):
        token_id = self.registry.mint_identity(AUTHORITY, RANDO, "https://google.com", ["kyc_clear"])

        self.assertEqual(self.registry.balance_of(AUTHORITY), 0)
        self.assertEqual(self.registry.balance_of(RANDO), 1)
        self.assertEqual(self.registry.token_of_owner_by_index(RANDO, 0), token_id)
        self.assertTrue(self.registry.get_trait(token_id, "kyc_clear"))
        self.assertFalse(self.registry.get_trait(token_id, "blurp"))
        self.assertEqual(self.registry.minted_at(token_id), T0)
        self.assertEqual(self.registry.token_uri(token_id), "https://google.com")
        self.assertTrue(self.registry.unexpired(token_id))

    def test_settable(self):
        token_id = self.registry.mint_identity(AUTHORITY, RANDO, "https://google.com", ["kyc_clear"])

        self.registry.set_trait(AUTHORITY, token_id, "accreditation", True)
        self.assertTrue(self.registry.get_trait(token_id, "accreditation"))
        self.assertEqual(self.events[-1], TraitUpdated(token_id, "accreditation", True))

        self.registry.set_trait(AUTHORITY, token_id, "accreditation", False)
        self.assertFalse(self.registry.get_trait(token_id, "accreditation"))
        self.assertEqual(self.events[-1], TraitUpdated(token_id, "accreditation", False))
        self.assertEqual(self.registry.traits(token_id), ["kyc_clear"])

    def test_only_authority_sets_traits(self):
        token_id = self.registry.mint_identity(AUTHORITY, RANDO, "uri", [])
        with self.assertRaises(UnauthorizedError):
            self.registry.set_trait(RANDO, token_id, "accreditation", True)
        with self.assertRaises(UnauthorizedError):
            self.registry.mint_identity(RANDO, RANDO, "uri", [])

    def test_expiry_is_recomputed_from_mint_time(self):
        token_id = self.registry.mint_identity(AUTHORITY, RANDO, "uri", ["kyc_clear"])

        self.clock.advance(90 * DAY)
        self.assertTrue(self.registry.unexpired(token_id))
        self.assertTrue(self.registry.has_unexpired_trait(token_id, "kyc_clear"))

        self.clock.advance(1)
        self.assertFalse(self.registry.unexpired(token_id))
        self.assertFalse(self.registry.has_unexpired_trait(token_id, "kyc_clear"))
        # the trait itself is still recorded
        self.assertTrue(self.registry.get_trait(token_id, "kyc_clear"))
        self.assertEqual(self.registry.expires_at(token_id), T0 + 90 * DAY)

    def test_burn(self):
        token_id = self.registry.mint_identity(AUTHORITY, RANDO, "uri", ["kyc_clear"])
        self.registry.burn(RANDO, token_id)
        self.assertEqual(self.registry.balance_of(RANDO), 0)
        with self.assertRaises(NotFoundError):
            self.registry.get_trait(token_id, "kyc_clear")


if __name__ == "__main__":
    unittest.main()
