#!/usr/bin/env python3
"""
ParallelID Command Line Interface

Authority-side tooling for producing self-mint authorizations.

Usage:
    parallelid keygen --output <file>
    parallelid address --key <file>
    parallelid sign-mint --key <file> --recipient <addr> --uri <uri> --trait kyc_clear \
        --subject-type individual --citizenship 840 --ttl 3600 --sequence 1
    parallelid digest --recipient <addr> --uri <uri> ... --sequence 1
"""

import argparse
import json
import sys
from typing import List, Optional

from . import config
from .credential import SubjectType
from .hashing import mint_digest
from .util import now_epoch


def save_json(data: dict, path: str):
    """Save JSON to file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def _not_after(args) -> int:
    if args.not_after is not None:
        return args.not_after
    return now_epoch() + args.ttl


def cmd_keygen(args):
    """Generate an authority key pair."""
    from .signing import AuthorityKey, save_authority_key

    key = AuthorityKey.generate(key_id=args.kid)
    save_authority_key(key, args.output)
    print(f"Authority key saved to: {args.output}", file=sys.stderr)
    print(key.address)
    return 0


def cmd_address(args):
    """Print the address of an authority key."""
    from .signing import load_authority_key

    print(load_authority_key(args.key).address)
    return 0


def cmd_sign_mint(args):
    """Sign a self-mint authorization for one recipient."""
    from .signing import load_authority_key, sign_mint_authorization

    key = load_authority_key(args.key)
    authorization = sign_mint_authorization(
        key,
        recipient=args.recipient,
        uri=args.uri,
        traits=args.trait,
        subject_type=SubjectType.parse(args.subject_type),
        citizenship=args.citizenship,
        not_after=_not_after(args),
        sequence=args.sequence,
        registry_address=args.registry,
        chain_id=args.chain_id
    )

    data = authorization.to_dict()
    if args.output:
        save_json(data, args.output)
        print(f"Authorization saved to: {args.output}", file=sys.stderr)
    else:
        print(json.dumps(data, indent=2))
    return 0


def cmd_digest(args):
    """Print the digest an authorization with these fields must sign."""
    digest = mint_digest(
        recipient=args.recipient,
        uri=args.uri,
        traits=args.trait,
        subject_type=SubjectType.parse(args.subject_type),
        citizenship=args.citizenship,
        not_after=_not_after(args),
        registry_address=args.registry,
        sequence=args.sequence,
        chain_id=args.chain_id
    )
    print(digest.hex())
    return 0


def _add_message_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--recipient", required=True, help="Address that will own the credential")
    parser.add_argument("--uri", required=True, help="Metadata URI")
    parser.add_argument("--trait", action="append", default=[], help="Trait name (repeatable, ordered)")
    parser.add_argument("--subject-type", default="individual", help="individual or business")
    parser.add_argument("--citizenship", type=int, required=True, help="ISO 3166-1 numeric code")
    expiry = parser.add_mutually_exclusive_group()
    expiry.add_argument("--not-after", type=int, help="Expiry as Unix seconds")
    expiry.add_argument("--ttl", type=int, default=3600, help="Expiry relative to now, in seconds")
    parser.add_argument("--sequence", type=int, required=True, help="Registry's pending sequence number")
    parser.add_argument("--registry", default=config.REGISTRY_ADDRESS, help="Registry address")
    parser.add_argument("--chain-id", type=int, default=config.CHAIN_ID, help="Chain/domain identifier")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parallelid",
        description="ParallelID authority tooling"
    )
    subparsers = parser.add_subparsers(dest="command")

    keygen = subparsers.add_parser("keygen", help="Generate an authority key")
    keygen.add_argument("--output", default=config.AUTHORITY_KEY_PATH, help="Key file to write")
    keygen.add_argument("--kid", default="authority", help="Key identifier")
    keygen.set_defaults(func=cmd_keygen)

    address = subparsers.add_parser("address", help="Show a key's address")
    address.add_argument("--key", default=config.AUTHORITY_KEY_PATH, help="Key file")
    address.set_defaults(func=cmd_address)

    sign = subparsers.add_parser("sign-mint", help="Sign a self-mint authorization")
    sign.add_argument("--key", default=config.AUTHORITY_KEY_PATH, help="Key file")
    sign.add_argument("--output", help="Write authorization JSON here instead of stdout")
    _add_message_arguments(sign)
    sign.set_defaults(func=cmd_sign_mint)

    digest = subparsers.add_parser("digest", help="Show the digest for a set of fields")
    _add_message_arguments(digest)
    digest.set_defaults(func=cmd_digest)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 2

    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
