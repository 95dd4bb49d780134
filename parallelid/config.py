"""
Configuration module for ParallelID.

Centralizes all configuration with environment variable support
and validation.
"""

import os
from pathlib import Path
from typing import Dict

from .hashing import ADDRESS_PATTERN

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("PARALLELID_ENV", "dev")  # dev|stage|prod

# Domain binding for self-mint authorizations
CHAIN_ID = int(os.getenv("PARALLELID_CHAIN_ID", "1"))
REGISTRY_ADDRESS = os.getenv("PARALLELID_REGISTRY_ADDRESS", "0x" + "00" * 19 + "01")

# Controlling authority
AUTHORITY_ADDRESS = os.getenv("PARALLELID_AUTHORITY_ADDRESS", "")
AUTHORITY_KEY_PATH = os.getenv("PARALLELID_AUTHORITY_KEY_PATH", "secrets/authority_key.json")

# Price of a self-mint, in the smallest unit of account
MINT_COST = int(os.getenv("PARALLELID_MINT_COST", str(10 ** 15)))

# Validity window of the boolean-trait predecessor registry
LEGACY_EXPIRY_DAYS = int(os.getenv("PARALLELID_LEGACY_EXPIRY_DAYS", "90"))

# Logging
LOG_LEVEL = os.getenv("PARALLELID_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("PARALLELID_LOG_JSON", "1").lower() in ("1", "true", "yes")


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Check the settings a registry needs before it can serve.
    Returns dict of setting -> usable.
    """
    return {
        "registry_address": bool(ADDRESS_PATTERN.match(REGISTRY_ADDRESS)),
        "authority_address": bool(ADDRESS_PATTERN.match(AUTHORITY_ADDRESS))
        or Path(AUTHORITY_KEY_PATH).exists(),
        "mint_cost": MINT_COST >= 0,
        "chain_id": CHAIN_ID >= 0,
    }


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("PARALLELID_DEBUG", "").lower() in ("1", "true", "yes")
