#!/usr/bin/env python3
"""scripts/mint_fixtures.py

Mint a mixed set of fixture assets for a beneficiary wallet.

Usage:
    python scripts/mint_fixtures.py [--config fixtures.yaml] [--core 1] [--pnfts 1] [--cnfts 1] [--token22 1]
                                    [--beneficiary <pubkey>] [--collection <pubkey>] [--tree <pubkey>]

Environment:
    ADMIN_KEYPAIR: payer / authority keypair (JSON byte array or base58)
    RPC_URL, DAS_API_URL, DEBUG_LOGS, ERROR_LOGS: see config/fixture_config.py
"""

import argparse
import asyncio
import os
import sys
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from solders.pubkey import Pubkey

from config import ConfigError, KeyLoadError, configure_logging, load_fixture_config, load_keypair_from_env
from execution import SendOptions, TransactionSender
from ingestion.assets import HeliusDasClient
from minting import AssetAggregator, AssetCounts


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mint fixture assets across NFT standards")
    parser.add_argument("--config", type=str, default=None, help="Path to fixture config YAML")
    parser.add_argument("--core", type=int, default=0, help="MPL Core assets to mint")
    parser.add_argument("--pnfts", type=int, default=0, help="Programmable NFTs to mint")
    parser.add_argument("--cnfts", type=int, default=0, help="Compressed NFTs to mint")
    parser.add_argument("--token22", type=int, default=0, help="Token-2022 group members to mint")
    parser.add_argument("--beneficiary", type=str, default=None, help="Owner of minted items [default: payer]")
    parser.add_argument("--collection", type=str, default=None, help="Existing Token Metadata collection")
    parser.add_argument("--core-collection", type=str, default=None, help="Existing MPL Core collection")
    parser.add_argument("--tree", type=str, default=None, help="Existing Merkle tree for cNFTs")
    return parser.parse_args()


def _pubkey(value: Optional[str]) -> Optional[Pubkey]:
    return Pubkey.from_string(value) if value else None


async def run(args: argparse.Namespace) -> int:
    config = load_fixture_config(args.config)
    configure_logging(config)
    payer = load_keypair_from_env()

    counts = AssetCounts(core=args.core, pnfts=args.pnfts, cnfts=args.cnfts, token22=args.token22)
    beneficiary = _pubkey(args.beneficiary) or payer.pubkey()
    options = SendOptions(skip_preflight=config.skip_preflight, commitment=config.commitment)

    async with TransactionSender(rpc_url=config.rpc_url, commitment=config.provisioning_commitment) as sender:
        async with HeliusDasClient.from_config(config) as das_client:
            aggregator = AssetAggregator(sender, payer, das_client, options=options)
            response = await aggregator.mint_assets(
                counts,
                beneficiary,
                collection=_pubkey(args.collection),
                core_collection=_pubkey(args.core_collection),
                tree=_pubkey(args.tree),
            )

    for standard, collection in response.as_dict().items():
        print(f"[mint_fixtures] {standard}: group={collection.group} items={len(collection)}")
    return 0


def main() -> None:
    args = parse_args()
    try:
        sys.exit(asyncio.run(run(args)))
    except (ConfigError, KeyLoadError) as e:
        print(f"[mint_fixtures] Config error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
