"""Protean Engine runner for the uniforms domain.

Processes events asynchronously when PROTEAN_ENV selects async event
processing (projectors and the restock handler run here instead of inline).

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from uniforms.domain import uniforms
    from uniforms.utils.logging import configure_logging

    configure_logging()
    uniforms.init()
    await Engine(uniforms).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
