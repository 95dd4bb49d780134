#!/usr/bin/env python3
"""
ParallelID Example - Credential Lifecycle End to End

Authority signs a self-mint authorization, the holder mints with it,
the credential is renewed and then flagged in a sanctions screening.

Run with: python examples/self_mint_example.py
"""

from parallelid import (
    AuthorityKey,
    InvalidSignatureError,
    ManualClock,
    ParallelIDRegistry,
    SubjectType,
    sign_mint_authorization,
)
from parallelid.logging_config import configure_logging

DAY = 86400


def main():
    configure_logging(level="INFO", json_format=False)

    clock = ManualClock()
    authority = AuthorityKey.generate()
    holder = AuthorityKey.generate().address
    registry = ParallelIDRegistry(authority=authority.address, mint_cost=1000, clock=clock)

    print("=" * 60)
    print("STEP 1: Authority signs a self-mint authorization")
    print("=" * 60)
    authorization = sign_mint_authorization(
        authority,
        recipient=holder,
        uri="https://example.com/token.json",
        traits=["kyc_clear", "aml"],
        subject_type=SubjectType.INDIVIDUAL,
        citizenship=840,
        not_after=clock() + 3600,
        sequence=registry.next_sequence,
        registry_address=registry.registry_address,
        chain_id=registry.chain_id
    )
    print(f"  Recipient: {authorization.recipient}")
    print(f"  Sequence:  {registry.next_sequence}")

    print("\nSTEP 2: Holder mints")
    token_id = registry.self_mint(holder, authorization, value=registry.mint_cost)
    print(f"  Credential {token_id}: traits={registry.traits(token_id)}")
    print(f"  Sanctions safe in 840: {registry.is_sanctions_safe_in(token_id, 840)}")

    print("\nSTEP 3: Replaying the same authorization")
    try:
        registry.self_mint(holder, authorization, value=registry.mint_cost)
    except InvalidSignatureError as e:
        print(f"  Rejected: {e.code.value}")

    print("\nSTEP 4: Renewal after 300 days")
    clock.advance(300 * DAY)
    registry.renew(authority.address, token_id, "https://example.com/token-v2.json", ["kyc_clear", "accredited"], 840)
    print(f"  minted_at={registry.minted_at(token_id)} last_issued_at={registry.last_issued_at(token_id)}")
    print(f"  traits={registry.traits(token_id)}")

    print("\nSTEP 5: Sanctions match recorded in 840")
    registry.add_sanctions(authority.address, token_id, 840)
    print(f"  Safe in 840: {registry.is_sanctions_safe_in(token_id, 840)}")
    print(f"  Safe in 834: {registry.is_sanctions_safe_in(token_id, 834)}")


if __name__ == "__main__":
    main()
