"""Run a stream co-host: ``python -m streamhost [config.json]``."""

import asyncio
import sys
from pathlib import Path

from loguru import logger

from streamhost import __logo__
from streamhost.client import StreamClientInterface
from streamhost.config.loader import load_config


async def _run(config_path: Path | None) -> None:
    config = load_config(config_path)
    await StreamClientInterface.start(config)
    await asyncio.Event().wait()


def main() -> None:
    config_path = Path(sys.argv[1]).expanduser() if len(sys.argv) > 1 else None
    logger.info("{} streamhost starting", __logo__)
    try:
        asyncio.run(_run(config_path))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
