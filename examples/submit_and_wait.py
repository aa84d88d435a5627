#!/usr/bin/env python3
"""
Example: Submit a transaction and wait for its receipt

Calls ``testNumber(uint256)`` on a contract deployed from the bundled
``simple.json`` ABI, waits for the receipt and prints the revert reason
if the transaction failed. The node must manage (and unlock) the sender
account.

Usage:
    python examples/submit_and_wait.py <network> <contract_address> <sender_address> <number>

Environment Variables:
    RPC_URL: Endpoint for the network (default: the network's public endpoint)
"""

import asyncio
import os
import sys

from ethrevert import ChainClient, MethodRegistry, PollingConfig, load_abi


async def main() -> int:
    if len(sys.argv) < 5:
        print(__doc__)
        return 2

    network, contract, sender, number = sys.argv[1:5]
    client = ChainClient.from_network(
        network,
        rpc_url=os.getenv("RPC_URL"),
        polling=PollingConfig(interval=2.0, max_attempts=150),
    )
    methods = MethodRegistry.from_abi(contract, load_abi("simple.json"))

    calls = await client.call(methods.get("getCalls"))
    print(f"getCalls() before: {calls['0'] if calls else None}")

    tx_hash = await client.send_transaction(sender, methods.get("testNumber"), int(number))
    print(f"Submitted: {tx_hash}")

    receipt = await client.wait_for_receipt(tx_hash)
    if receipt.failed:
        print(f"Reverted in block {receipt.block_number}: {receipt.revert_reason!r}")
        return 1

    print(f"Confirmed in block {receipt.block_number} (gas used: {receipt.gas_used})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
