from datetime import date, datetime, timedelta, timezone

import pytest

from portal.db.models import Event, MarketIntel, Offer, Opportunity, Resource, Update


@pytest.fixture
def resources(db, stamp):
    rows = [
        Resource(title="Gold deck", tier_restriction="Gold Member (Tier 4)", resource_type="deck",
                 url="https://x/gold", created_at=stamp(5), updated_at=stamp(5)),
        Resource(title="Full guide", tier_restriction="Full Member", resource_type="guide",
                 url="https://x/full", created_at=stamp(3), updated_at=stamp(3)),
        Resource(title="Open template", tier_restriction=None, resource_type="template",
                 url="https://x/open", created_at=stamp(4), updated_at=stamp(4)),
        Resource(title="Legacy kit", tier_restriction="Associate Agency (Tier 1)", resource_type="guide",
                 url="https://x/legacy", created_at=stamp(1), updated_at=stamp(1)),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_content_requires_authentication(client):
    response = client.get("/resources/")
    assert response.status_code in (401, 403)


def test_resources_listing_orders_by_access(client, auth_headers, resources):
    response = client.get("/resources/", headers=auth_headers("Associate Member"))

    assert response.status_code == 200
    body = response.json()

    assert [i["title"] for i in body["items"]] == [
        "Legacy kit",
        "Open template",
        "Gold deck",
        "Full guide",
    ]
    assert [i["is_accessible"] for i in body["items"]] == [True, True, False, False]
    assert body["stats"] == {"total": 4, "accessible": 2, "restricted": 2}


def test_restricted_items_hide_gated_fields(client, auth_headers, resources):
    body = client.get("/resources/", headers=auth_headers("Free Member")).json()
    by_title = {i["title"]: i for i in body["items"]}

    assert by_title["Open template"]["url"] == "https://x/open"
    assert by_title["Gold deck"]["url"] is None
    assert by_title["Gold deck"]["tier_restriction"] == "Gold Member"
    assert "Gold Member" in by_title["Gold deck"]["restriction_message"]


def test_resource_filters_and_facets(client, auth_headers, resources):
    headers = auth_headers("Gold Member")

    body = client.get("/resources/", params={"resource_type": "guide"}, headers=headers).json()
    assert sorted(i["title"] for i in body["items"]) == ["Full guide", "Legacy kit"]
    assert body["facets"]["resource_type"] == ["deck", "guide", "template"]
    assert body["facets"]["tier_restriction"] == [
        "Free Member", "Associate Member", "Full Member", "Gold Member",
    ]
    assert body["facets"]["accessible_tiers"] == [
        "Free Member", "Associate Member", "Full Member", "Gold Member",
    ]

    body = client.get("/resources/", params={"tier": "associate agency"}, headers=headers).json()
    assert [i["title"] for i in body["items"]] == ["Legacy kit"]


@pytest.mark.parametrize("value", ["all", "All", ""])
def test_tier_filter_all_means_every_tier(client, auth_headers, resources, value):
    headers = auth_headers("Gold Member")

    body = client.get("/resources/", params={"tier": value}, headers=headers).json()
    assert len(body["items"]) == 4

    same = client.get("/resources/", params={"resource_type": value}, headers=headers).json()
    assert len(same["items"]) == len(body["items"])


def test_detail_is_forbidden_below_required_tier(client, auth_headers, resources):
    gold_id = resources[0].id

    response = client.get(f"/resources/{gold_id}", headers=auth_headers("Full Member"))
    assert response.status_code == 403
    detail = response.json()["detail"]
    assert detail["required_tier"] == "Gold Member"
    assert detail["upgrade_options"] == ["Gold Member"]

    response = client.get(f"/resources/{gold_id}", headers=auth_headers("Gold Member (Tier 3)"))
    assert response.status_code == 200
    assert response.json()["url"] == "https://x/gold"


def test_detail_missing_item(client, auth_headers):
    response = client.get("/offers/999", headers=auth_headers())
    assert response.status_code == 404


def test_expired_opportunities_are_hidden(client, auth_headers, db):
    today = date.today()
    db.add_all([
        Opportunity(title="Open", deadline=today + timedelta(days=5), location="Kenya",
                    tier_restriction="Full Member", application_link="https://apply"),
        Opportunity(title="Closed", deadline=today - timedelta(days=1), location="Ghana"),
        Opportunity(title="Rolling", deadline=None, location="Kenya"),
    ])
    db.commit()

    body = client.get("/opportunities/", headers=auth_headers("Free Member")).json()

    assert sorted(i["title"] for i in body["items"]) == ["Open", "Rolling"]
    assert body["facets"]["location"] == ["Kenya"]
    locked = next(i for i in body["items"] if i["title"] == "Open")
    assert locked["application_link"] is None


def test_past_events_are_hidden(client, auth_headers, db):
    now = datetime.now(timezone.utc)
    db.add_all([
        Event(title="Summit", date=now + timedelta(days=10), event_type="summit"),
        Event(title="Old webinar", date=now - timedelta(days=10), event_type="webinar"),
    ])
    db.commit()

    body = client.get("/events/", headers=auth_headers()).json()

    assert [i["title"] for i in body["items"]] == ["Summit"]


@pytest.mark.parametrize(
    "path, model, extra",
    [
        ("/market-intel/", MarketIntel, {"region": "East Africa", "type": "report"}),
        ("/offers/", Offer, {}),
        ("/updates/", Update, {"category": "news"}),
    ],
)
def test_other_sections_classify_items(client, auth_headers, db, path, model, extra):
    db.add_all([
        model(title="premium", tier_restriction="Gold Member", **extra),
        model(title="basic", tier_restriction="Free Member", **extra),
    ])
    db.commit()

    body = client.get(path, headers=auth_headers("Full Member")).json()

    assert [i["title"] for i in body["items"]] == ["basic", "premium"]
    assert [i["is_accessible"] for i in body["items"]] == [True, False]
