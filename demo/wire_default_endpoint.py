#!/usr/bin/env python3
"""
Default endpoint wiring demo

Deploys EndpointV2, SendUln302 and ReceiveUln302 on two in-memory networks,
wires them together, then runs the wiring a second time to show that an
already wired topology produces no transactions.
"""

import sys
import asyncio
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from devnet import Devnet, setup_default_endpoint
from omnigraph import WiringConfig, WiringError
from observability import create_logger, setup_tracing, shutdown_tracing
from observability.diagnostics import LoggingDiagnosticsSink

ETHEREUM_MAINNET = 101
AVALANCHE_MAINNET = 106


async def run(config: WiringConfig, tracer=None) -> int:
    # Root logger, so every package's module loggers reach the handler
    logger = create_logger("", config.log_level)
    diagnostics = LoggingDiagnosticsSink(logger)
    devnet = Devnet()
    networks = [ETHEREUM_MAINNET, AVALANCHE_MAINNET]

    print("=" * 60)
    print("Default Endpoint Wiring Demo")
    print("=" * 60)

    try:
        print("\n[1/2] Wiring fresh deployment...")
        first = await setup_default_endpoint(devnet, networks, config, diagnostics, tracer)
        print(f"  ✓ {len(first.confirmed)} transactions confirmed ({first.state.value})")
        for result in first.confirmed:
            print(f"    {result.transaction.describe()} -> {result.confirmation_hash[:18]}...")

        print("\n[2/2] Wiring again (should be a no-op)...")
        second = await setup_default_endpoint(devnet, networks, config, diagnostics, tracer)
        print(f"  ✓ {len(second.results)} transactions needed ({second.state.value})")
    except WiringError as e:
        print(f"\n✗ Wiring failed: {e}")
        return 1

    print("\n" + "=" * 60)
    print("✓ DEMO PASSED")
    print("=" * 60)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Wire a default endpoint setup on a devnet")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every transaction transition",
    )
    parser.add_argument(
        "--console-spans",
        action="store_true",
        help="Export tracing spans to the console",
    )
    args = parser.parse_args()

    config = WiringConfig.from_env()
    if args.verbose:
        config.log_level = "DEBUG"
    if args.console_spans:
        config.console_spans = True

    tracer = None
    if config.otlp_endpoint or config.console_spans:
        tracer = setup_tracing(
            config.service_name, config.otlp_endpoint, config.console_spans
        )

    try:
        return asyncio.run(run(config, tracer))
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())
