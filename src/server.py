"""Protean Engine runner for the kitchen domain.

Starts Engine workers that process events asynchronously, including the
inbound PaymentCaptured handler that marks orders paid.

Usage:
    python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the kitchen domain."""
    from kitchen.domain import kitchen

    kitchen.init()
    return kitchen


async def run():
    engine = Engine(_get_domain())
    await engine.run()


def main():
    argparse.ArgumentParser(description="mealstream Engine runner").parse_args()
    asyncio.run(run())


if __name__ == "__main__":
    main()
