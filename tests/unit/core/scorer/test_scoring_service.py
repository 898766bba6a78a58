#!/usr/bin/env python3
"""
Tests for ScoringService against the SQLite test database.
"""

import uuid
from datetime import datetime, timezone

import pytest

from core.config_loader import MatchingConfig, SignalWeights
from core.exceptions import StudentNotFoundError, ListingNotFoundError
from core.scorer import ScoringService
from database.models import MatchScore, MatchEngineConfig
from tests.factories import (
    make_tenant, make_student, make_listing, make_sport_season, make_schedule,
    make_skill_mapping, make_score
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SIGNALS = {'temporal', 'skills', 'sustainability', 'growth', 'trust', 'compensation'}


@pytest.fixture
def scorer(repo):
    return ScoringService(repo, MatchingConfig(), clock=lambda: NOW)


@pytest.mark.db
class TestComputeMatch:

    def test_creates_cache_row_with_breakdown(self, session, repo, scorer):
        student = make_student(session, skills=[("Python", "Technology", 4)])
        listing = make_listing(session)

        result = scorer.compute_match(student.id, listing.id)

        assert 0 <= result.score <= 100
        assert set(result.signals) == SIGNALS
        assert result.from_cache is False
        assert result.is_stale is False

        row = repo.scores.get_cached_score(student.id, listing.id)
        assert row is not None
        assert row.composite_score == result.score
        history = repo.scores.get_history(row.id)
        assert [h.change_reason for h in history] == ['initial']

    def test_second_read_is_served_from_cache(self, session, scorer):
        student = make_student(session)
        listing = make_listing(session)

        first = scorer.compute_match(student.id, listing.id)
        second = scorer.compute_match(student.id, listing.id)

        assert second.from_cache is True
        assert second.score == first.score
        assert second.signals == first.signals

    def test_recompute_without_changes_is_idempotent(self, session, repo, scorer):
        student = make_student(session, skills=[("SQL", "Technology", 3)])
        listing = make_listing(session)

        first = scorer.compute_match(student.id, listing.id)
        again = scorer.compute_match(student.id, listing.id, force_recompute=True)

        assert again.from_cache is False
        assert again.score == first.score
        assert again.signals == first.signals
        row = repo.scores.get_cached_score(student.id, listing.id)
        assert len(repo.scores.get_history(row.id)) == 1

    def test_stale_row_is_recomputed_and_cleared(self, session, repo, scorer):
        student = make_student(session)
        listing = make_listing(session)
        make_score(session, student, listing, score=12.0, is_stale=True)

        result = scorer.compute_match(student.id, listing.id)

        assert result.from_cache is False
        row = repo.scores.get_cached_score(student.id, listing.id)
        assert row.is_stale is False
        assert row.composite_score == result.score
        reasons = [h.change_reason for h in repo.scores.get_history(row.id)]
        assert reasons == ['recomputation']

    def test_schedule_lowers_temporal_signal(self, session, scorer):
        free = make_student(session, first_name="Free")
        athlete = make_student(session, first_name="Athlete")
        season = make_sport_season(session, start_month=2, end_month=5, practice_hours_per_week=25,
                                   competition_hours_per_week=5)
        make_schedule(session, athlete, schedule_type='sport', sport_season_id=season.id)
        listing = make_listing(session, hours_per_week=20)

        free_score = scorer.compute_match(free.id, listing.id)
        athlete_score = scorer.compute_match(athlete.id, listing.id)

        assert athlete_score.signals['temporal']['score'] < free_score.signals['temporal']['score']

    def test_athletic_transfers_surface_in_skills(self, session, scorer):
        student = make_student(session)
        season = make_sport_season(session, sport_name="Soccer")
        make_schedule(session, student, schedule_type='sport', sport_season_id=season.id)
        make_skill_mapping(session, sport_name="Soccer", professional_skill="Teamwork", transfer_strength=0.9)
        listing = make_listing(session, skills_required=["Teamwork", "Excel"])

        result = scorer.compute_match(student.id, listing.id)

        transfers = result.signals['skills']['details']['athleticTransferSkills']
        assert transfers[0]['professionalSkill'] == "Teamwork"
        assert transfers[0]['sourceSport'] == "Soccer"

    def test_tenant_can_disable_athletic_transfer(self, session, scorer):
        tenant = make_tenant(session)
        session.add(MatchEngineConfig(tenant_id=tenant.id, signal_weights={}, enable_athletic_transfer=False))
        student = make_student(session, tenant=tenant)
        season = make_sport_season(session, sport_name="Soccer")
        make_schedule(session, student, schedule_type='sport', sport_season_id=season.id)
        make_skill_mapping(session, sport_name="Soccer", professional_skill="Teamwork")
        listing = make_listing(session, tenant=tenant, skills_required=["Teamwork"])

        result = scorer.compute_match(student.id, listing.id)

        assert result.signals['skills']['details']['athleticTransferSkills'] == []

    def test_missing_student_raises_without_writing(self, session, scorer):
        listing = make_listing(session)

        with pytest.raises(StudentNotFoundError):
            scorer.compute_match(uuid.uuid4(), listing.id)
        assert session.query(MatchScore).count() == 0

    def test_missing_listing_raises(self, session, scorer):
        student = make_student(session)

        with pytest.raises(ListingNotFoundError):
            scorer.compute_match(student.id, uuid.uuid4())


@pytest.mark.db
class TestWeights:

    def test_tenant_weights_override_defaults(self, session, scorer):
        tenant = make_tenant(session)
        session.add(MatchEngineConfig(tenant_id=tenant.id, signal_weights={'skills': 0.9, 'bogus': 5}))
        session.flush()

        weights = scorer.resolve_weights(tenant.id)

        assert weights.skills == 0.9
        assert weights.temporal == 0.25
        assert not hasattr(weights, 'bogus')

    def test_defaults_without_tenant(self, scorer):
        assert scorer.resolve_weights(None).as_dict() == MatchingConfig().signal_weights.as_dict()

    def test_compute_match_scores_with_resolved_weights(self, session, scorer, monkeypatch):
        student = make_student(session)
        listing = make_listing(session)
        only_skills = SignalWeights(
            temporal=0.0, skills=1.0, sustainability=0.0,
            growth=0.0, trust=0.0, compensation=0.0
        )
        seen = []

        def fake_resolve(tenant_id, tenant_config=None):
            seen.append(tenant_id)
            return only_skills

        monkeypatch.setattr(scorer, 'resolve_weights', fake_resolve)

        result = scorer.compute_match(student.id, listing.id)

        assert seen == [student.tenant_id]
        assert result.signals['skills']['weight'] == 1.0
        assert result.signals['temporal']['weight'] == 0.0
        assert result.score == result.signals['skills']['score']

    def test_tenant_weights_flow_into_compute_match(self, session, scorer):
        tenant = make_tenant(session)
        session.add(MatchEngineConfig(tenant_id=tenant.id, signal_weights={
            'temporal': 0, 'skills': 1, 'sustainability': 0,
            'growth': 0, 'trust': 0, 'compensation': 0
        }))
        session.flush()
        student = make_student(session, tenant=tenant)
        listing = make_listing(session, tenant=tenant)

        result = scorer.compute_match(student.id, listing.id)

        assert result.signals['skills']['weight'] == 1.0
        assert result.signals['growth']['weight'] == 0.0


@pytest.mark.db
class TestRankedMatches:

    def test_student_matches_ranked_and_filtered(self, session, scorer):
        student = make_student(session, skills=[("Python", "Technology", 5), ("SQL", "Technology", 4)])
        strong = make_listing(session, title="Strong", skills_required=["Python", "SQL"])
        weak = make_listing(session, title="Weak", skills_required=["Photoshop", "Illustrator"],
                            category="Design", is_paid=False, remote_allowed=False)
        make_listing(session, title="Draft", status="draft")

        results = scorer.get_student_matches(student.id)

        assert [r.listing['title'] for r in results] == ["Strong", "Weak"]
        assert results[0].composite_score >= results[1].composite_score
        assert results[0].matched_skills == ['python', 'sql']

        threshold = results[0].composite_score
        filtered = scorer.get_student_matches(student.id, min_score=threshold)
        assert [r.listing_id for r in filtered] == [strong.id]
        assert weak.id not in [r.listing_id for r in filtered]

    def test_lazy_compute_is_capped(self, session, repo):
        scorer = ScoringService(repo, MatchingConfig(lazy_compute_limit=2), clock=lambda: NOW)
        student = make_student(session)
        for i in range(3):
            make_listing(session, title=f"Listing {i}")

        results = scorer.get_student_matches(student.id)

        assert len(results) == 2
        assert session.query(MatchScore).count() == 2

    def test_stale_rows_still_served(self, session, repo):
        scorer = ScoringService(repo, MatchingConfig(lazy_compute_limit=1), clock=lambda: NOW)
        student = make_student(session)
        first = make_listing(session, title="First")
        second = make_listing(session, title="Second")
        make_score(session, student, first, score=70.0, is_stale=True)
        make_score(session, student, second, score=65.0, is_stale=True)

        results = scorer.get_student_matches(student.id)

        assert len(results) == 2
        assert sum(1 for r in results if r.is_stale) == 1

    def test_unknown_student(self, scorer):
        with pytest.raises(StudentNotFoundError):
            scorer.get_student_matches(uuid.uuid4())

    def test_listing_matches(self, session, scorer):
        listing = make_listing(session)
        make_student(session, first_name="Ana", skills=[("Python", "Technology", 5)])
        make_student(session, first_name="Ben")

        results = scorer.get_listing_matches(listing.id)

        assert len(results) == 2
        assert {r.student['firstName'] for r in results} == {"Ana", "Ben"}
        assert results[0].composite_score >= results[1].composite_score
