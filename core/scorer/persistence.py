#!/usr/bin/env python3
"""
Persistence Operations - Score cache upsert with history.

One row per (student, listing). A fresh insert writes an 'initial' history
entry; a recompute that moves the score by more than HISTORY_THRESHOLD
writes a 'recomputation' entry.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from database.models import MatchScore
from database.repository import MatchEngineRepository

logger = logging.getLogger(__name__)

ENGINE_VERSION = 1
HISTORY_THRESHOLD = 0.5


def save_score(
    repo: MatchEngineRepository,
    student_id: Any,
    listing_id: Any,
    tenant_id: Optional[Any],
    composite_score: float,
    breakdown: Dict[str, Dict[str, Any]],
    computation_time_ms: int,
    now: datetime
) -> MatchScore:
    row = repo.scores.get_cached_score(student_id, listing_id)

    if row is None:
        row = MatchScore(
            student_id=student_id,
            listing_id=listing_id,
            tenant_id=tenant_id,
            composite_score=composite_score,
            signal_breakdown=breakdown,
            is_stale=False,
            computation_time_ms=computation_time_ms,
            version=ENGINE_VERSION,
            computed_at=now,
            created_at=now,
            updated_at=now
        )
        repo.db.add(row)
        repo.db.flush()
        repo.scores.add_history(row, composite_score, breakdown, 'initial')
        repo.db.flush()
        logger.debug(f"Cached new score {composite_score:.2f} for student {student_id} / listing {listing_id}")
        return row

    old_score = row.composite_score
    old_breakdown = row.signal_breakdown

    row.composite_score = composite_score
    row.signal_breakdown = breakdown
    row.is_stale = False
    row.computation_time_ms = computation_time_ms
    row.version = ENGINE_VERSION
    row.computed_at = now
    row.updated_at = now
    if tenant_id is not None:
        row.tenant_id = tenant_id

    if old_score is None or abs(composite_score - old_score) > HISTORY_THRESHOLD:
        repo.scores.add_history(
            row, composite_score, breakdown, 'recomputation',
            old_score=old_score, old_breakdown=old_breakdown
        )
        logger.debug(f"Score changed {old_score} -> {composite_score:.2f} for student {student_id} / listing {listing_id}")

    repo.db.flush()
    return row
