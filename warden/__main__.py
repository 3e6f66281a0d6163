"""Entry point: ``python -m warden``."""

import asyncio

from warden.app import main


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
