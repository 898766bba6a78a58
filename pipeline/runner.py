"""Recomputation batch runner.

Drains a bounded batch of the recomputation queue. Used by the cron
endpoint of the web application; main.py only triggers that endpoint.

Failure isolation:
- a failing sweep pair is logged and skipped, the item still succeeds
- a failing item is rolled back, its error recorded, and the batch goes on
- only failing to claim the batch aborts the run (BatchClaimError)
"""

import time
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from core.config_loader import MatchingConfig, WorkerConfig
from core.exceptions import BatchClaimError
from core.scorer import ScoringService
from database.models import RecomputationQueueItem, Specific, Sweep
from database.repository import MatchEngineRepository


logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Result of one worker invocation."""
    processed: int
    remaining: int
    errors: int
    batch_size: int
    dead: int = 0
    execution_time: float = 0.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BatchWorker:
    """
    Sequential, single-threaded queue drainer.

    Each item runs in its own transaction: commit on success, rollback and
    record the error on failure.
    """

    def __init__(
        self,
        repo: MatchEngineRepository,
        matching_config: Optional[MatchingConfig] = None,
        worker_config: Optional[WorkerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.repo = repo
        self.worker_config = worker_config or WorkerConfig()
        self.clock = clock or _utcnow
        self.scorer = ScoringService(repo, config=matching_config, clock=self.clock)

    def run(self) -> BatchResult:
        run_start = time.time()

        logger.info("=" * 60)
        logger.info("STARTING RECOMPUTATION BATCH")
        logger.info("=" * 60)

        try:
            items = self.repo.queue.claim_pending(self.worker_config.batch_size)
            item_ids = [item.id for item in items]
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to claim recomputation batch: {e}")
            raise BatchClaimError(str(e)) from e

        logger.info(f"Claimed {len(item_ids)} queue items (batch size {self.worker_config.batch_size})")

        processed = 0
        errors = 0
        dead = 0

        for item_id in item_ids:
            item = self.repo.queue.get(item_id)
            if item is None:
                continue

            try:
                self.process_item(item)
                self.repo.queue.mark_processed(item, now=self.clock())
                self.repo.commit()
                processed += 1
            except Exception as e:
                errors += 1
                logger.error(f"Queue item {item_id} failed: {e}")
                self.repo.rollback()
                if self._record_failure(item_id, e):
                    dead += 1

        remaining = self.repo.queue.count_pending()
        execution_time = time.time() - run_start

        logger.info(f"Batch complete: processed={processed} errors={errors} dead={dead} "
                    f"remaining={remaining} in {execution_time:.2f}s")

        return BatchResult(
            processed=processed,
            remaining=remaining,
            errors=errors,
            batch_size=len(item_ids),
            dead=dead,
            execution_time=execution_time
        )

    def process_item(self, item: RecomputationQueueItem) -> int:
        """Recompute what the item targets. Returns the number of pairs recomputed."""
        target = item.target

        if isinstance(target, Specific):
            self.scorer.compute_match(
                item.student_id,
                target.listing_id,
                force_recompute=True,
                tenant_id=item.tenant_id
            )
            return 1

        if isinstance(target, Sweep):
            return self._sweep(item)

        raise TypeError(f"Unsupported recompute target: {target!r}")

    def _sweep(self, item: RecomputationQueueItem) -> int:
        stale = self.repo.scores.get_stale_scores_for_student(
            item.student_id, limit=self.worker_config.sweep_limit
        )
        pairs = [(row.student_id, row.listing_id, row.tenant_id) for row in stale]

        recomputed = 0
        for student_id, listing_id, tenant_id in pairs:
            try:
                self.scorer.compute_match(
                    student_id,
                    listing_id,
                    force_recompute=True,
                    tenant_id=tenant_id if tenant_id is not None else item.tenant_id
                )
                recomputed += 1
            except Exception as e:
                logger.warning(f"Sweep {item.id}: skipping pair {student_id}/{listing_id}: {e}")

        logger.info(f"Sweep {item.id} for student {item.student_id}: recomputed {recomputed}/{len(pairs)} stale pairs")
        return recomputed

    def _record_failure(self, item_id: Any, error: Exception) -> bool:
        item = self.repo.queue.get(item_id)
        if item is None:
            return False
        is_dead = self.repo.queue.mark_failed(
            item,
            str(error) or type(error).__name__,
            max_attempts=self.worker_config.max_attempts,
            now=self.clock()
        )
        self.repo.commit()
        return is_dead


def run_recompute_batch(
    repo: MatchEngineRepository,
    matching_config: Optional[MatchingConfig] = None,
    worker_config: Optional[WorkerConfig] = None
) -> BatchResult:
    """Run one batch against the given repository bundle."""
    return BatchWorker(repo, matching_config, worker_config).run()
