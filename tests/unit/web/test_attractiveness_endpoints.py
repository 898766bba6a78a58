"""
Tests for the attractiveness endpoints.
"""

import uuid

import pytest

from tests.factories import make_tenant, make_listing, make_corporate_rating, make_student


def _headers(tenant, user_id=None, role="student"):
    return {
        "X-User-Id": str(user_id or uuid.uuid4()),
        "X-User-Role": role,
        "X-Tenant-Id": str(tenant.id),
    }


@pytest.fixture
def tenant(session):
    tenant = make_tenant(session, features=["matchEngineAttractive"])
    session.commit()
    return tenant


@pytest.fixture
def listing(session, tenant):
    author_id = uuid.uuid4()
    listing = make_listing(
        session, tenant=tenant, author_id=author_id, compensation="$22/hr",
        description="Weekly mentor sessions and a certification budget"
    )
    make_corporate_rating(session, make_student(session, tenant=tenant), author_id, 4, listing=listing)
    session.commit()
    return listing


@pytest.mark.db
class TestListingAttractiveness:
    def test_computes_and_caches(self, client, repo, tenant, listing):
        response = client.get(f"/match-engine/listings/{listing.id}/attractiveness", headers=_headers(tenant))

        assert response.status_code == 200
        body = response.json()
        assert body["listingId"] == str(listing.id)
        assert body["authorId"] == str(listing.author_id)
        assert 0 <= body["attractivenessScore"] <= 100
        assert set(body["signals"]) == {
            "compensation", "flexibility", "reputation", "completionRate", "growthOpportunity"
        }
        assert body["signals"]["compensation"]["details"]["estimatedHourlyRate"] == 22
        assert body["signals"]["growthOpportunity"]["details"]["indicators"] == ["mentor", "certification"]
        assert body["sampleSize"] == 1
        assert body["isStale"] is False

        row = repo.attractiveness.get(listing.id)
        assert row is not None
        assert row.attractiveness_score == body["attractivenessScore"]

    def test_feature_must_be_enabled(self, client, session, listing):
        plain = make_tenant(session, features=["matchEngineSchedule"])
        session.commit()

        response = client.get(f"/match-engine/listings/{listing.id}/attractiveness", headers=_headers(plain))

        assert response.status_code == 403

    def test_requires_identity(self, client, listing):
        response = client.get(f"/match-engine/listings/{listing.id}/attractiveness")

        assert response.status_code == 401

    def test_invalid_listing_id(self, client, tenant):
        response = client.get("/match-engine/listings/not-a-uuid/attractiveness", headers=_headers(tenant))

        assert response.status_code == 400

    def test_unknown_listing(self, client, tenant):
        response = client.get(f"/match-engine/listings/{uuid.uuid4()}/attractiveness", headers=_headers(tenant))

        assert response.status_code == 404


@pytest.mark.db
class TestCompanyAttractiveness:
    def test_partner_reads_own_company(self, client, tenant, listing):
        score = client.get(
            f"/match-engine/listings/{listing.id}/attractiveness", headers=_headers(tenant)
        ).json()["attractivenessScore"]

        response = client.get(
            f"/match-engine/companies/{listing.author_id}/attractiveness",
            headers=_headers(tenant, user_id=listing.author_id, role="corporate_partner")
        )

        assert response.status_code == 200
        body = response.json()
        assert body["authorId"] == str(listing.author_id)
        assert body["listingCount"] == 1
        assert body["avgScore"] == round(score)
        assert body["scores"] == [{"listingId": str(listing.id), "score": score}]

    def test_partner_cannot_read_other_company(self, client, tenant, listing):
        response = client.get(
            f"/match-engine/companies/{listing.author_id}/attractiveness",
            headers=_headers(tenant, role="corporate_partner")
        )

        assert response.status_code == 403

    def test_students_are_forbidden(self, client, tenant, listing):
        response = client.get(
            f"/match-engine/companies/{listing.author_id}/attractiveness", headers=_headers(tenant)
        )

        assert response.status_code == 403

    def test_admin_sees_empty_company(self, client, tenant):
        response = client.get(
            f"/match-engine/companies/{uuid.uuid4()}/attractiveness", headers=_headers(tenant, role="admin")
        )

        assert response.status_code == 200
        assert response.json()["avgScore"] == 0
        assert response.json()["scores"] == []
