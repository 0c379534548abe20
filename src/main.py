"""Demo entrypoint wiring the log shipper together.

This module contains a small, end-to-end "smoke test" that:

- Loads configuration from environment.
- Routes the standard `logging` module through a `DataDogHandler`.
- Writes a few lines and flushes them periodically and once more on shutdown.

It is **not** intended to be production wiring; it is a convenient manual
integration harness.
"""

from __future__ import annotations

import asyncio
import logging

from config import load_config
from logshipper import DataDogHandler, DataDogLogger, PeriodicFlusher


async def _run(shipper: DataDogLogger, flush_interval: float) -> None:
    """Emit a handful of records while the periodic flusher runs."""
    app_log = logging.getLogger("demo")
    flusher = PeriodicFlusher(shipper, interval=flush_interval)
    flusher.start()
    try:
        for i in range(5):
            app_log.info("demo message %d", i)
            await asyncio.sleep(0.5)
    finally:
        await flusher.aclose()
    print(f"[flusher] {flusher.degraded_status()}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = load_config().shipper
    shipper = DataDogLogger.from_config(config)

    handler = DataDogHandler(shipper)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    demo_log = logging.getLogger("demo")
    demo_log.addHandler(handler)

    try:
        asyncio.run(_run(shipper, config.flush_interval))
    finally:
        demo_log.removeHandler(handler)
        handler.close()
        shipper.close()


if __name__ == "__main__":
    main()
