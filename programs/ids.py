"""
programs/ids.py

Program ids used by the fixture minter.
"""
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import INSTRUCTIONS as SYSVAR_INSTRUCTIONS_ID
from spl.token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)


# Metaplex
TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
BUBBLEGUM_PROGRAM_ID = Pubkey.from_string("BGUMAp9Gq7iTEuizy4pqaxsTyUCBK68MDfK752saRPUY")
MPL_CORE_PROGRAM_ID = Pubkey.from_string("CoREENxT6tW1HoK8ypY1SxRMZTcVPm7R94rH4PZNhX7d")
TOKEN_AUTH_RULES_PROGRAM_ID = Pubkey.from_string("auth9SigNpDKz4sJJ1DfCTuZrZNSAgh9sFD3rboVmgg")

# SPL account compression
ACCOUNT_COMPRESSION_PROGRAM_ID = Pubkey.from_string("cmtDvXumGCrqC1Age74AVPhSRVXJMd8PJS91L8KbNCK")
NOOP_PROGRAM_ID = Pubkey.from_string("noopb9bkMVfRPU8AsbpTUg8AQkHtKwMYZiFUjNRtMmV")

# Default rule set attached to programmable NFTs minted by the protocol
DEFAULT_PNFT_RULE_SET = Pubkey.from_string("eBJLFYPxJmMGKuFwpDWkzxZeUrad92kZRC5BJLpzyT9")

__all__ = [
    "ACCOUNT_COMPRESSION_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "BUBBLEGUM_PROGRAM_ID",
    "DEFAULT_PNFT_RULE_SET",
    "MPL_CORE_PROGRAM_ID",
    "NOOP_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
    "SYSVAR_INSTRUCTIONS_ID",
    "TOKEN_2022_PROGRAM_ID",
    "TOKEN_AUTH_RULES_PROGRAM_ID",
    "TOKEN_METADATA_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
]
