#!/usr/bin/env python3
"""
Invalidation Service - staleness flags plus recompute requests.

When an upstream fact a score depends on changes, the affected cache rows
are flagged stale and a queue item is inserted in the same transaction.
Stale rows stay servable until the batch worker refreshes them.
"""

import logging
from typing import Any, Optional

from database.models import Specific, Sweep
from database.repository import MatchEngineRepository

logger = logging.getLogger(__name__)

STUDENT_SWEEP_PRIORITY = 5
LISTING_CHANGE_PRIORITY = 3
DIRECT_REQUEST_PRIORITY = 10


class InvalidationService:
    def __init__(self, repo: MatchEngineRepository, default_priority: int = STUDENT_SWEEP_PRIORITY):
        self.repo = repo
        self.default_priority = default_priority

    def invalidate_student_scores(
        self,
        student_id: Any,
        reason: str,
        tenant_id: Optional[Any] = None
    ) -> int:
        """
        Flag every cached score of the student stale and queue one sweep.

        Returns the number of rows newly flagged. The sweep item is inserted
        even when nothing was cached, so pairs cached later by a racing
        reader are still picked up.
        """
        flagged = self.repo.scores.mark_student_stale(student_id)
        self.repo.queue.enqueue(
            student_id=student_id,
            target=Sweep(),
            reason=reason,
            priority=self.default_priority,
            tenant_id=tenant_id
        )
        logger.info(f"Invalidated student {student_id} ({reason}): {flagged} scores stale, sweep queued")
        return flagged

    def invalidate_listing_scores(
        self,
        listing_id: Any,
        reason: str,
        tenant_id: Optional[Any] = None
    ) -> int:
        """Flag the listing's cached scores stale and queue one pair per affected student."""
        flagged = self.repo.scores.mark_listing_stale(listing_id)
        self.repo.attractiveness.mark_stale(listing_id)
        student_ids = self.repo.scores.student_ids_for_listing(listing_id)
        for student_id in student_ids:
            self.repo.queue.enqueue(
                student_id=student_id,
                target=Specific(listing_id),
                reason=reason,
                priority=LISTING_CHANGE_PRIORITY,
                tenant_id=tenant_id
            )
        logger.info(f"Invalidated listing {listing_id} ({reason}): {flagged} scores stale, "
                    f"{len(student_ids)} recomputes queued")
        return flagged

    def invalidate_tenant_scores(self, tenant_id: Any, reason: str) -> int:
        """
        Flag every cached score in the tenant stale and queue one sweep per student.

        Used when the tenant's scoring configuration changes, since every
        composite in the tenant was weighted with the old values.
        """
        flagged = self.repo.scores.mark_tenant_stale(tenant_id)
        student_ids = self.repo.scores.student_ids_for_tenant(tenant_id)
        for student_id in student_ids:
            self.repo.queue.enqueue(
                student_id=student_id,
                target=Sweep(),
                reason=reason,
                priority=self.default_priority,
                tenant_id=tenant_id
            )
        logger.info(f"Invalidated tenant {tenant_id} ({reason}): {flagged} scores stale, "
                    f"{len(student_ids)} sweeps queued")
        return flagged

    def request_recompute(
        self,
        student_id: Any,
        listing_id: Any,
        reason: str = 'manual',
        priority: int = DIRECT_REQUEST_PRIORITY,
        tenant_id: Optional[Any] = None
    ):
        """Queue a single pair ahead of routine sweeps."""
        return self.repo.queue.enqueue(
            student_id=student_id,
            target=Specific(listing_id),
            reason=reason,
            priority=priority,
            tenant_id=tenant_id
        )
