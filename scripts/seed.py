#!/usr/bin/env python3
"""Load or remove the demo user accounts."""

from __future__ import annotations

import argparse
import asyncio
import logging

from dishka import Scope
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.db import create_tables
from app.deps import create_container
from app.services.seeder import DatabaseSeeder

LOGGER = logging.getLogger("seed")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the users database.")
    parser.add_argument(
        "command",
        choices=["seed", "clear"],
        help="`seed` inserts the demo accounts, `clear` deletes every user.",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding.",
    )
    return parser.parse_args()


async def run(command: str, with_tables: bool) -> None:
    container = create_container()
    try:
        if with_tables:
            await create_tables(await container.get(AsyncEngine))
            LOGGER.info("Tables created")
        async with container(scope=Scope.REQUEST) as request_container:
            seeder = await request_container.get(DatabaseSeeder)
            if command == "clear":
                await seeder.clear()
            else:
                users = await seeder.seed()
                LOGGER.info("Seeded %d users", len(users))
    finally:
        await container.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = parse_args()
    asyncio.run(run(args.command, args.create_tables))


if __name__ == "__main__":
    main()
