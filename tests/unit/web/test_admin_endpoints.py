"""
Tests for the admin engine config endpoints.
"""

import uuid

import pytest

from database.models import Sweep
from tests.factories import make_tenant, make_student, make_listing, make_score

URL = "/match-engine/admin/config"


def _headers(tenant=None, role="admin"):
    headers = {"X-User-Id": str(uuid.uuid4()), "X-User-Role": role}
    if tenant is not None:
        headers["X-Tenant-Id"] = str(tenant.id)
    return headers


@pytest.fixture
def tenant(session):
    tenant = make_tenant(session, features=["matchEngineAdmin"])
    session.commit()
    return tenant


@pytest.mark.db
class TestEngineConfigAccess:
    def test_students_are_forbidden(self, client, tenant):
        response = client.get(URL, headers=_headers(tenant, role="student"))

        assert response.status_code == 403

    def test_tenant_without_feature_is_forbidden(self, client, session):
        plain = make_tenant(session, features=["matchEngineSchedule"])
        session.commit()

        response = client.get(URL, headers=_headers(plain))

        assert response.status_code == 403

    def test_anonymous_is_unauthorized(self, client):
        response = client.get(URL)

        assert response.status_code == 401


@pytest.mark.db
class TestEngineConfig:
    def test_defaults_when_unset(self, client, tenant):
        response = client.get(URL, headers=_headers(tenant))

        assert response.status_code == 200
        body = response.json()
        assert body["isDefault"] is True
        assert body["tenantId"] == str(tenant.id)
        assert body["signalWeights"]["skills"] == 0.30
        assert body["minScoreThreshold"] == 20.0
        assert body["maxResultsPerQuery"] == 50

    def test_update_merges_weights(self, client, tenant):
        response = client.put(
            URL,
            json={"signalWeights": {"skills": 0.5}, "minScoreThreshold": 35},
            headers=_headers(tenant)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["isDefault"] is False
        assert body["signalWeights"]["skills"] == 0.5
        assert body["signalWeights"]["temporal"] == 0.25
        assert body["minScoreThreshold"] == 35.0

        followup = client.put(URL, json={"signalWeights": {"trust": 0.2}}, headers=_headers(tenant)).json()
        assert followup["signalWeights"]["skills"] == 0.5
        assert followup["signalWeights"]["trust"] == 0.2
        assert followup["minScoreThreshold"] == 35.0

        stored = client.get(URL, headers=_headers(tenant)).json()
        assert stored == followup

    def test_unknown_signal_rejected(self, client, tenant):
        response = client.put(URL, json={"signalWeights": {"luck": 1.0}}, headers=_headers(tenant))

        assert response.status_code == 400
        assert "luck" in response.json()["details"][0]["message"]

    def test_all_zero_weights_rejected(self, client, tenant):
        zeros = {name: 0 for name in ("temporal", "skills", "sustainability", "growth", "trust", "compensation")}

        response = client.put(URL, json={"signalWeights": zeros}, headers=_headers(tenant))

        assert response.status_code == 400
        assert "positive sum" in response.json()["error"]

    def test_update_without_tenant(self, client):
        response = client.put(URL, json={"minScoreThreshold": 10}, headers=_headers())

        assert response.status_code == 400


@pytest.mark.db
class TestEngineConfigInvalidation:
    @pytest.fixture
    def cached(self, session, tenant):
        student = make_student(session, tenant=tenant)
        listing = make_listing(session, tenant=tenant)
        score = make_score(session, student, listing)
        outsider = make_score(session, make_student(session, first_name="Elsewhere"), listing)
        session.commit()
        return student, score, outsider

    def test_weight_change_marks_tenant_scores_stale(self, client, session, repo, tenant, cached):
        student, score, outsider = cached

        response = client.put(URL, json={"signalWeights": {"skills": 0.6}}, headers=_headers(tenant))

        assert response.status_code == 200
        session.refresh(score)
        session.refresh(outsider)
        assert score.is_stale is True
        assert outsider.is_stale is False
        items = repo.queue.list_for_student(student.id)
        assert [(item.target, item.reason) for item in items] == [(Sweep(), 'config_change')]

    def test_feature_switch_marks_tenant_scores_stale(self, client, session, tenant, cached):
        _, score, _ = cached

        client.put(URL, json={"enableScheduleMatching": False}, headers=_headers(tenant))

        session.refresh(score)
        assert score.is_stale is True

    def test_threshold_change_keeps_scores_fresh(self, client, session, repo, tenant, cached):
        student, score, _ = cached

        response = client.put(URL, json={"minScoreThreshold": 40}, headers=_headers(tenant))

        assert response.status_code == 200
        session.refresh(score)
        assert score.is_stale is False
        assert repo.queue.list_for_student(student.id) == []

    def test_resubmitting_same_weights_keeps_scores_fresh(self, client, session, tenant, cached):
        _, score, _ = cached
        client.put(URL, json={"signalWeights": {"skills": 0.6}}, headers=_headers(tenant))
        score.is_stale = False
        session.commit()

        client.put(URL, json={"signalWeights": {"skills": 0.6}}, headers=_headers(tenant))

        session.refresh(score)
        assert score.is_stale is False


@pytest.mark.db
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "match-engine"}
