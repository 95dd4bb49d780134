import os
import tempfile
import unittest
from unittest import mock

from parallelid import config


class TestConfigValidation(unittest.TestCase):

    def test_defaults_without_authority_are_flagged(self):
        with mock.patch.object(config, "AUTHORITY_ADDRESS", ""), \
                mock.patch.object(config, "AUTHORITY_KEY_PATH", "/nonexistent/authority.json"):
            checks = config.validate_config()
        self.assertTrue(checks["registry_address"])
        self.assertFalse(checks["authority_address"])
        self.assertTrue(checks["mint_cost"])

    def test_authority_address_satisfies_check(self):
        with mock.patch.object(config, "AUTHORITY_ADDRESS", "0x" + "ab" * 20):
            self.assertTrue(config.validate_config()["authority_address"])

    def test_authority_key_file_satisfies_check(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "authority.json")
            with open(path, "w") as f:
                f.write("{}")
            with mock.patch.object(config, "AUTHORITY_ADDRESS", ""), \
                    mock.patch.object(config, "AUTHORITY_KEY_PATH", path):
                self.assertTrue(config.validate_config()["authority_address"])

    def test_malformed_registry_address_is_flagged(self):
        with mock.patch.object(config, "REGISTRY_ADDRESS", "registry"):
            self.assertFalse(config.validate_config()["registry_address"])

    def test_negative_mint_cost_is_flagged(self):
        with mock.patch.object(config, "MINT_COST", -1):
            self.assertFalse(config.validate_config()["mint_cost"])

    def test_production_flag_follows_environment(self):
        with mock.patch.object(config, "ENV", "prod"):
            self.assertTrue(config.is_production())
        with mock.patch.object(config, "ENV", "dev"):
            self.assertFalse(config.is_production())

    def test_debug_flag_reads_environment(self):
        with mock.patch.dict(os.environ, {"PARALLELID_DEBUG": "true"}):
            self.assertTrue(config.is_debug())
        with mock.patch.dict(os.environ, {"PARALLELID_DEBUG": ""}):
            self.assertFalse(config.is_debug())


if __name__ == "__main__":
    unittest.main()
