import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from parallelid import ManualClock, MintAuthorization, ParallelIDRegistry, load_authority_key
from parallelid.cli import main

T0 = 1_700_000_000
HOLDER = "0x" + "11" * 20
REGISTRY_ADDRESS = "0x" + "cc" * 20


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.key_path = os.path.join(self.tmp.name, "secrets", "authority.json")

    def tearDown(self):
        self.tmp.cleanup()

    def message_args(self, sequence=1):
        return [
            "--recipient", HOLDER,
            "--uri", "https://example.com/token.json",
            "--trait", "kyc_clear",
            "--trait", "accredited",
            "--subject-type", "business",
            "--citizenship", "840",
            "--not-after", str(T0 + 3600),
            "--sequence", str(sequence),
            "--registry", REGISTRY_ADDRESS,
            "--chain-id", "7",
        ]

    def test_keygen_and_address(self):
        code, out, _ = run(["keygen", "--output", self.key_path])
        self.assertEqual(code, 0)
        address = out.strip()
        self.assertEqual(address, load_authority_key(self.key_path).address)

        code, out, _ = run(["address", "--key", self.key_path])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), address)

    def test_signed_authorization_is_accepted_by_registry(self):
        _, out, _ = run(["keygen", "--output", self.key_path])
        authority = out.strip()
        auth_path = os.path.join(self.tmp.name, "authorization.json")

        code, _, _ = run(["sign-mint", "--key", self.key_path, "--output", auth_path] + self.message_args())
        self.assertEqual(code, 0)

        with open(auth_path, encoding="utf-8") as f:
            authorization = MintAuthorization.from_dict(json.load(f))

        registry = ParallelIDRegistry(
            authority=authority,
            registry_address=REGISTRY_ADDRESS,
            chain_id=7,
            mint_cost=0,
            clock=ManualClock(T0)
        )
        token_id = registry.self_mint(HOLDER, authorization)
        self.assertEqual(registry.traits(token_id), ["kyc_clear", "accredited"])
        self.assertEqual(registry.citizenship(token_id), 840)

    def test_digest_matches_signed_message(self):
        run(["keygen", "--output", self.key_path])
        _, out, _ = run(["sign-mint", "--key", self.key_path] + self.message_args())
        authorization = MintAuthorization.from_dict(json.loads(out))

        code, out, _ = run(["digest"] + self.message_args())
        self.assertEqual(code, 0)
        expected = authorization.digest(registry_address=REGISTRY_ADDRESS, sequence=1, chain_id=7)
        self.assertEqual(out.strip(), expected.hex())

    def test_bad_input_exits_nonzero(self):
        code, _, err = run(["digest"] + self.message_args()[:-4] + ["--registry", "0x12", "--chain-id", "7"])
        self.assertEqual(code, 1)
        self.assertIn("Invalid address", err)

    def test_missing_key_file(self):
        code, _, err = run(["address", "--key", os.path.join(self.tmp.name, "missing.json")])
        self.assertEqual(code, 1)

    def test_no_command_prints_help(self):
        code, out, _ = run([])
        self.assertEqual(code, 2)
        self.assertIn("usage", out.lower())


if __name__ == "__main__":
    unittest.main()
