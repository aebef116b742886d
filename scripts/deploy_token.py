#!/usr/bin/env python3
"""
Launch a pump.fun token from the command line.

- Uploads the metadata JSON (Pinata if PINATA_API_KEY/PINATA_SECRET_KEY are set,
  otherwise the IPFS HTTP API at IPFS_API_URL).
- Creates the mint on the bonding curve and hands mint authority to the
  program in the same transaction.

Signing key: --keypair path (JSON byte array or base-58 text) or DEPLOYER_PRIVATE_KEY.
Default cluster: mainnet-beta (override with --rpc or SOLANA_RPC).

Usage: python scripts/deploy_token.py --name Doge --symbol DOGE --image https://... [--dry-run]
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import base58
from solders.keypair import Keypair

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.append(ROOT)

from pump_deployer.config import get_settings  # noqa: E402
from pump_deployer.errors import DeployError  # noqa: E402
from pump_deployer.deployer import handle_deploy, load_signing_key, plan_deployment  # noqa: E402
from pump_deployer.tx_builder import instruction_to_dict  # noqa: E402


def read_signing_key(path: str) -> str:
    raw = Path(path).read_text().strip()
    if raw.startswith("["):
        return base58.b58encode(bytes(json.loads(raw))).decode()
    return raw


def dry_run(name: str, symbol: str, uri: str, signing_key: str) -> dict:
    payer = load_signing_key(signing_key).pubkey()
    mint = Keypair().pubkey()
    plan = plan_deployment(name, symbol, uri, payer, mint)
    return {
        "payer": str(payer),
        "mint": str(plan.mint),
        "metadata": str(plan.metadata),
        "bonding_curve": str(plan.bonding_curve),
        "vault": str(plan.vault),
        "mint_authority": str(plan.mint_authority),
        "instructions": [instruction_to_dict(plan.create_ix), instruction_to_dict(plan.revoke_ix)],
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a pump.fun token and revoke its mint authority.")
    parser.add_argument("--name", required=True, help="Token name (max 32 bytes).")
    parser.add_argument("--symbol", required=True, help="Token symbol (max 10 bytes).")
    parser.add_argument("--image", required=True, help="Image URL embedded in the metadata JSON.")
    parser.add_argument("--rpc", default=None, help="RPC endpoint; defaults to SOLANA_RPC or mainnet-beta.")
    parser.add_argument("--keypair", default=None, help="Path to the payer keypair file.")
    parser.add_argument("--dry-run", action="store_true", help="Print derived accounts and instructions without sending.")
    parser.add_argument("--uri", default="https://ipfs.io/ipfs/dry-run", help="Metadata URI used by --dry-run.")
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    signing_key = read_signing_key(args.keypair) if args.keypair else os.environ.get("DEPLOYER_PRIVATE_KEY", "")
    if args.dry_run:
        if not signing_key:
            print("[error] no signing key: pass --keypair or set DEPLOYER_PRIVATE_KEY", file=sys.stderr)
            return 2
        try:
            plan = dry_run(args.name, args.symbol, args.uri, signing_key)
        except DeployError as exc:
            print(f"[error] {exc.message}", file=sys.stderr)
            return 1
        print(json.dumps(plan, indent=2))
        return 0

    status, body = handle_deploy(
        {
            "tokenName": args.name,
            "tokenSymbol": args.symbol,
            "imageRef": args.image,
            "signingKey": signing_key,
            "rpcEndpoint": args.rpc,
        },
        settings=settings,
    )
    print(json.dumps(body, indent=2))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
