"""Protean Engine runner for Storefront domains.

Starts Engine workers that process events asynchronously (production):
- OutboxProcessor: publishes committed events to the broker
- StreamSubscriptions: invokes projectors and event handlers, including
  the Notifications handler for Payments' CheckoutCompleted

Usage:
    python src/server.py                        # Run all domain engines
    python src/server.py --domain notifications # Run a single engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

from shared.logging import configure_logging

DOMAIN_NAMES = ["reviews", "payments", "notifications"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "reviews":
        from reviews.domain import reviews as domain
    elif name == "payments":
        from payments.domain import payments as domain
    elif name == "notifications":
        from notifications.domain import notifications as domain
    else:
        raise ValueError(f"Unknown domain: {name}")

    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Storefront Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    configure_logging()
    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
