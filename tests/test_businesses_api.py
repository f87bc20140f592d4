"""API tests for business listings."""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from listindia.domain.models.business import BusinessCategory
from listindia.domain.models.user import UserRole
from listindia.interfaces.deps import get_business_repository
from listindia.main import app


def _payload(**overrides):
    payload = {
        "name": "Spice Garden",
        "description": "Authentic South Indian meals and filter coffee.",
        "category": "Restaurant",
        "address": "12 Brigade Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "zip_code": "560025",
        "phone": "+91 80 4000 1234",
        "email": "hello@spicegarden.in",
        "website": "https://spicegarden.in",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def owner(make_user):
    return make_user(role=UserRole.BUSINESS)


class TestCreateBusiness:

    def test_owner_creates_listing(self, client, owner, auth_headers):
        response = client.post("/api/businesses", json=_payload(), headers=auth_headers(owner))

        assert response.status_code == 201
        body = response.json()
        assert body["owner_id"] == owner.id
        assert body["category"] == "restaurant"
        assert body["rating"] == 0.0
        assert body["review_count"] == 0
        assert body["is_approved"] is True
        assert body["is_featured"] is False

    def test_admin_can_create(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)
        assert client.post("/api/businesses", json=_payload(), headers=auth_headers(admin)).status_code == 201

    def test_customer_is_forbidden(self, client, make_user, auth_headers):
        response = client.post("/api/businesses", json=_payload(), headers=auth_headers(make_user()))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "RoleForbidden"

    def test_role_is_read_from_store(self, client, owner, auth_headers, db_session):
        headers = auth_headers(owner)
        owner.role = UserRole.CUSTOMER
        db_session.commit()

        response = client.post("/api/businesses", json=_payload(), headers=headers)

        assert response.status_code == 403

    def test_duplicate_name_and_address(self, client, owner, auth_headers):
        client.post("/api/businesses", json=_payload(), headers=auth_headers(owner))

        response = client.post(
            "/api/businesses",
            json=_payload(name="spice garden", address="12 BRIGADE ROAD"),
            headers=auth_headers(owner),
        )

        assert response.status_code == 409

    def test_rating_cannot_be_supplied(self, client, owner, auth_headers):
        response = client.post("/api/businesses", json=_payload(rating=5.0), headers=auth_headers(owner))

        assert response.status_code == 201
        assert response.json()["rating"] == 0.0

    def test_unknown_category(self, client, owner, auth_headers):
        response = client.post("/api/businesses", json=_payload(category="spaceport"), headers=auth_headers(owner))
        assert response.status_code == 422


class TestListBusinesses:

    def test_only_approved_are_listed(self, client, make_business):
        make_business()
        make_business(is_approved=False)

        response = client.get("/api/businesses")

        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 1

    def test_filters(self, client, make_business):
        make_business(name="Dosa Corner", city="Chennai", state="Tamil Nadu")
        make_business(name="Style Studio", category=BusinessCategory.BEAUTY)
        make_business(name="Bean There", description="Single origin coffee roasters.")

        by_city = client.get("/api/businesses?city=chennai").json()
        by_category = client.get("/api/businesses?category=BEAUTY").json()
        by_search = client.get("/api/businesses?search=coffee").json()
        everything = client.get("/api/businesses?category=all").json()

        assert [b["name"] for b in by_city["items"]] == ["Dosa Corner"]
        assert [b["name"] for b in by_category["items"]] == ["Style Studio"]
        assert [b["name"] for b in by_search["items"]] == ["Bean There"]
        assert everything["pagination"]["total"] == 3

    def test_search_treats_wildcards_literally(self, client, make_business):
        make_business(name="Fifty Percent Off")
        assert client.get("/api/businesses?search=%25").json()["pagination"]["total"] == 0

    def test_flags_callers_own_listings(self, client, owner, make_business, auth_headers):
        make_business(owner=owner, name="Mine")
        make_business(name="Theirs")

        signed_in = client.get("/api/businesses", headers=auth_headers(owner)).json()["items"]
        anonymous = client.get("/api/businesses").json()["items"]

        assert {b["name"]: b["is_owner"] for b in signed_in} == {"Mine": True, "Theirs": False}
        assert not any(b["is_owner"] for b in anonymous)

    def test_unknown_category_filter(self, client):
        response = client.get("/api/businesses?category=spaceport")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "BusinessRuleViolation"

    def test_sort_by_rating(self, client, make_business, business_repo):
        low = make_business(name="Low")
        high = make_business(name="High")
        business_repo.set_rating_summary(low, 2.0, 1)
        business_repo.set_rating_summary(high, 4.5, 2)

        response = client.get("/api/businesses?sort=rating&order=desc")

        assert [b["name"] for b in response.json()["items"]] == ["High", "Low"]

    def test_invalid_sort_falls_back_to_newest(self, client, make_business):
        make_business(name="Older")
        make_business(name="Newer")

        response = client.get("/api/businesses?sort=password_hash&order=sideways")

        assert response.status_code == 200
        assert [b["name"] for b in response.json()["items"]] == ["Newer", "Older"]

    def test_pagination(self, client, make_business):
        for _ in range(5):
            make_business()

        pagination = client.get("/api/businesses?limit=2&offset=2").json()["pagination"]

        assert pagination == {
            "total": 5,
            "limit": 2,
            "offset": 2,
            "has_more": True,
            "total_pages": 3,
            "current_page": 2,
        }

    def test_page_size_is_capped(self, client, make_business):
        make_business()
        assert client.get("/api/businesses?limit=500").json()["pagination"]["limit"] == 100

    def test_featured(self, client, make_business):
        make_business(name="Plain")
        make_business(name="Star", is_featured=True)
        make_business(name="Hidden Star", is_featured=True, is_approved=False)

        response = client.get("/api/businesses/featured")

        assert [b["name"] for b in response.json()] == ["Star"]

    def test_categories_and_cities(self, client, make_business):
        make_business()
        make_business()
        make_business(category=BusinessCategory.HEALTHCARE, city="Pune", state="Maharashtra")

        categories = client.get("/api/businesses/categories").json()
        cities = client.get("/api/businesses/cities").json()

        assert categories[0] == {"value": "restaurant", "label": "Restaurant", "count": 2}
        assert {"value": "healthcare", "label": "Healthcare", "count": 1} in categories
        assert cities[0] == {"city": "Bengaluru", "state": "Karnataka", "label": "Bengaluru, Karnataka", "count": 2}

    def test_get_single(self, client, make_business):
        business = make_business()
        hidden = make_business(is_approved=False)

        assert client.get(f"/api/businesses/{business.id}").json()["id"] == business.id
        assert client.get(f"/api/businesses/{hidden.id}").status_code == 404
        assert client.get("/api/businesses/9999").status_code == 404


class TestManageBusiness:

    def test_owner_updates(self, client, owner, make_business, auth_headers):
        business = make_business(owner=owner)

        response = client.put(
            f"/api/businesses/{business.id}",
            json={"phone": "+91 80 9999 0000"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 200
        assert response.json()["phone"] == "+91 80 9999 0000"
        assert response.json()["name"] == business.name

    def test_rating_is_not_writable(self, client, owner, make_business, auth_headers):
        business = make_business(owner=owner)

        response = client.put(f"/api/businesses/{business.id}", json={"rating": 5.0}, headers=auth_headers(owner))

        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["name", "category", "phone", "email"])
    def test_null_for_required_field_is_rejected(self, client, owner, make_business, auth_headers, field):
        business = make_business(owner=owner)

        response = client.put(f"/api/businesses/{business.id}", json={field: None}, headers=auth_headers(owner))

        assert response.status_code == 422
        assert client.get(f"/api/businesses/{business.id}").json()["name"] == business.name

    def test_website_can_be_cleared(self, client, owner, make_business, auth_headers):
        business = make_business(owner=owner, website="https://chaipoint.in/")

        response = client.put(f"/api/businesses/{business.id}", json={"website": None}, headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json()["website"] is None

    def test_other_owner_is_forbidden(self, client, owner, make_user, make_business, auth_headers):
        business = make_business(owner=owner)
        intruder = make_user(role=UserRole.BUSINESS)

        response = client.put(f"/api/businesses/{business.id}", json={"phone": "1"}, headers=auth_headers(intruder))

        assert response.status_code == 403

    def test_admin_deletes_any_listing(self, client, owner, make_user, make_business, auth_headers):
        business = make_business(owner=owner)
        admin = make_user(role=UserRole.ADMIN)

        response = client.delete(f"/api/businesses/{business.id}", headers=auth_headers(admin))

        assert response.status_code == 204
        assert client.get(f"/api/businesses/{business.id}").status_code == 404

    def test_delete_removes_reviews(self, client, owner, make_user, make_business, auth_headers, review_repo):
        business = make_business(owner=owner)
        reviewer = make_user()
        review_id = review_repo.create({"business_id": business.id, "user_id": reviewer.id, "rating": 4}).id

        response = client.delete(f"/api/businesses/{business.id}", headers=auth_headers(owner))

        assert response.status_code == 204
        review_repo.db.expire_all()
        assert review_repo.get_by_id(review_id) is None


class TestStoreOutage:

    def test_store_failure_is_reported_as_unavailable(self, client):
        repo = Mock()
        repo.get_with_filters.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        app.dependency_overrides[get_business_repository] = lambda: repo

        response = client.get("/api/businesses")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "StoreUnavailable"
