import time
import logging
import signal
import argparse

import requests
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from core.config_loader import load_config
from database.init_db import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False


signal.signal(signal.SIGINT, signal_handler)
signal.signal(signal.SIGTERM, signal_handler)


class TransientTriggerError(Exception):
    """Connection failures and 5xx/429 responses; worth retrying."""


@retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(5),
    retry=retry_if_exception_type(TransientTriggerError),
    reraise=True
)
def trigger_recompute(endpoint_url: str, secret: str, timeout: int) -> dict:
    """POST the cron endpoint once and return its counters."""
    try:
        response = requests.post(
            endpoint_url,
            headers={"Authorization": f"Bearer {secret}"},
            timeout=timeout
        )
    except requests.RequestException as e:
        raise TransientTriggerError(str(e)) from e

    if response.status_code == 429 or response.status_code >= 500:
        raise TransientTriggerError(f"HTTP {response.status_code}: {response.text[:200]}")
    response.raise_for_status()
    return response.json()


def run_cycle(config) -> bool:
    """
    Trigger one recompute batch.

    Returns True when the queue still has pending items and the batch
    made progress without errors. A batch that only failed is not worth
    repeating before the next interval.
    """
    cycle_start = time.time()
    try:
        result = trigger_recompute(
            config.schedule.endpoint_url,
            config.cron.secret,
            config.schedule.request_timeout_seconds
        )
    except TransientTriggerError as e:
        logger.error(f"Recompute trigger failed after retries: {e}")
        return False
    except requests.HTTPError as e:
        logger.error(f"Recompute trigger rejected: {e}")
        return False

    cycle_elapsed = time.time() - cycle_start
    logger.info(
        f"Batch done in {cycle_elapsed:.2f}s: processed={result.get('processed')} "
        f"errors={result.get('errors')} remaining={result.get('remaining')}"
    )
    remaining = result.get('remaining') or 0
    processed = result.get('processed') or 0
    errors = result.get('errors') or 0
    return remaining > 0 and processed > 0 and errors == 0


def main():
    parser = argparse.ArgumentParser(description="Match Engine recompute driver")
    parser.add_argument('--once', action='store_true', help='Trigger a single batch and exit')
    parser.add_argument('--init-db', action='store_true', help='Create tables before starting')
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')
    args = parser.parse_args()

    config = load_config(args.config)
    if not config.cron.secret:
        logger.error("cron.secret is not set (CRON_SECRET); the endpoint would reject every call")
        return 1

    if args.init_db:
        init_db(config.database.url)

    if args.once:
        run_cycle(config)
        return 0

    interval = config.schedule.interval_seconds
    logger.info(f"Recompute driver starting: {config.schedule.endpoint_url} every {interval}s")

    cycle_count = 0
    while running:
        cycle_count += 1
        logger.info(f"=== Starting Cycle #{cycle_count} ===")
        backlog = run_cycle(config)

        if running and not backlog:
            logger.info(f"=== Cycle #{cycle_count} completed. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running:
                    break
                time.sleep(5)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
