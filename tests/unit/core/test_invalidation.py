#!/usr/bin/env python3
"""
Tests for InvalidationService.
"""

import pytest

from core.invalidation import InvalidationService, LISTING_CHANGE_PRIORITY
from database.models import Specific, Sweep, MatchScore
from tests.factories import make_tenant, make_student, make_listing, make_score


@pytest.mark.db
class TestInvalidateStudent:

    def test_all_scores_stale_and_one_sweep_queued(self, session, repo):
        student = make_student(session)
        other = make_student(session, first_name="Other")
        listings = [make_listing(session, title=f"L{i}") for i in range(3)]
        for listing in listings:
            make_score(session, student, listing)
        make_score(session, other, listings[0])

        flagged = InvalidationService(repo).invalidate_student_scores(student.id, 'schedule_change')
        session.commit()

        assert flagged == 3
        rows = session.query(MatchScore).filter(MatchScore.student_id == student.id).all()
        assert all(row.is_stale for row in rows)
        untouched = session.query(MatchScore).filter(MatchScore.student_id == other.id).one()
        assert untouched.is_stale is False

        items = repo.queue.list_for_student(student.id)
        assert len(items) == 1
        assert items[0].target == Sweep()
        assert items[0].reason == 'schedule_change'
        assert items[0].priority == 5
        assert items[0].is_pending

    def test_already_stale_rows_are_not_counted(self, session, repo):
        student = make_student(session)
        make_score(session, student, make_listing(session), is_stale=True)
        make_score(session, student, make_listing(session, title="Fresh"))

        assert InvalidationService(repo).invalidate_student_scores(student.id, 'profile_update') == 1

    def test_sweep_queued_even_without_cached_scores(self, session, repo):
        student = make_student(session)

        flagged = InvalidationService(repo, default_priority=7).invalidate_student_scores(student.id, 'skills_change')

        assert flagged == 0
        items = repo.queue.list_for_student(student.id)
        assert len(items) == 1
        assert items[0].priority == 7


@pytest.mark.db
class TestInvalidateListing:

    def test_one_specific_item_per_affected_student(self, session, repo):
        listing = make_listing(session)
        students = [make_student(session, first_name=f"S{i}") for i in range(2)]
        for student in students:
            make_score(session, student, listing)

        flagged = InvalidationService(repo).invalidate_listing_scores(listing.id, 'listing_update')

        assert flagged == 2
        for student in students:
            items = repo.queue.list_for_student(student.id)
            assert [item.target for item in items] == [Specific(listing.id)]
            assert items[0].priority == LISTING_CHANGE_PRIORITY

    def test_request_recompute_jumps_the_queue(self, session, repo):
        student = make_student(session)
        listing = make_listing(session)
        service = InvalidationService(repo)
        service.invalidate_student_scores(student.id, 'schedule_change')
        service.request_recompute(student.id, listing.id)

        claimed = repo.queue.claim_pending()

        assert claimed[0].target == Specific(listing.id)
        assert claimed[0].priority == 10


@pytest.mark.db
class TestInvalidateTenant:

    def test_flags_tenant_rows_and_sweeps_each_student(self, session, repo):
        tenant = make_tenant(session)
        students = [make_student(session, tenant=tenant, first_name=f"S{i}") for i in range(2)]
        listings = [make_listing(session, tenant=tenant, title=f"L{i}") for i in range(2)]
        for student in students:
            for listing in listings:
                make_score(session, student, listing)
        elsewhere = make_score(session, make_student(session, tenant=make_tenant(session, name="Other U")), listings[0])

        flagged = InvalidationService(repo).invalidate_tenant_scores(tenant.id, 'config_change')

        assert flagged == 4
        assert elsewhere.is_stale is False
        for student in students:
            items = repo.queue.list_for_student(student.id)
            assert [item.target for item in items] == [Sweep()]
            assert items[0].reason == 'config_change'
            assert items[0].tenant_id == tenant.id

    def test_tenant_without_scores_queues_nothing(self, session, repo):
        tenant = make_tenant(session)

        assert InvalidationService(repo).invalidate_tenant_scores(tenant.id, 'config_change') == 0
        assert repo.queue.count_pending() == 0
