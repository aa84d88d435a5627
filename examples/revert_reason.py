#!/usr/bin/env python3
"""
Example: Revert Reason Lookup

Replays a failed transaction and prints why it reverted.

Usage:
    python examples/revert_reason.py <tx_hash> [network] [block_number]

Environment Variables:
    RPC_URL: Endpoint for the network (default: the network's public endpoint)
"""

import asyncio
import logging
import os
import sys

from ethrevert import ArchiveRequiredError, DecodeFailure, EthRevertError, RevertReasonResolver, get_default_provider
from ethrevert.utils import configure_logging


async def main() -> int:
    if len(sys.argv) < 2:
        print(__doc__)
        return 2

    tx_hash = sys.argv[1]
    network = sys.argv[2] if len(sys.argv) > 2 else "mainnet"
    block_number = sys.argv[3] if len(sys.argv) > 3 else None

    configure_logging(logging.DEBUG if os.getenv("DEBUG") else logging.INFO)
    rpc_url = os.getenv("RPC_URL")
    resolver = RevertReasonResolver(
        provider_factory=lambda net: get_default_provider(net, rpc_url=rpc_url),
    )

    try:
        reason = await resolver.resolve(tx_hash, network, block_number)
    except (DecodeFailure, ArchiveRequiredError) as e:
        # Explainable failures: report and give up
        print(f"Could not recover revert reason: {e.message}")
        return 1
    except EthRevertError as e:
        print(f"Error: {e}")
        return 1

    print(f"Revert reason: {reason!r}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
