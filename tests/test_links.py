import pytest
from fastapi.testclient import TestClient

from shortlink_app.recorder import VisitEvent
from shortlink_app.schemas.link import LinkCreate
from shortlink_app.services.link_service import LinkService
from shortlink_app.services.visit_service import VisitService


def _seed_links(db_session, count):
    service = LinkService(db_session)
    return [
        service.create_link(LinkCreate(original_url=f"https://example.com/{i}", short_name=f"link{i:03d}"))
        for i in range(count)
    ]


class TestLinkCrud:
    """Create / read / update / delete"""

    def test_create_link(self, client: TestClient):
        payload = {"original_url": "https://example.com/page", "short_name": "mylink"}

        response = client.post("/api/links", json=payload)
        assert response.status_code == 201

        data = response.json()
        assert data["id"]
        assert data["original_url"] == payload["original_url"]
        assert data["short_name"] == "mylink"
        assert data["short_url"].endswith("/r/mylink")
        assert "created_at" in data

    def test_create_link_generates_short_name(self, client: TestClient):
        response = client.post("/api/links", json={"original_url": "https://example.com/"})
        assert response.status_code == 201

        data = response.json()
        assert len(data["short_name"]) == 8
        assert data["short_name"].isalnum()
        assert data["short_name"] in data["short_url"]

    def test_empty_short_name_is_generated(self, client: TestClient):
        response = client.post("/api/links", json={"original_url": "https://example.com/", "short_name": ""})
        assert response.status_code == 201
        assert response.json()["short_name"]

    def test_get_link(self, client: TestClient, db_session):
        link = _seed_links(db_session, 1)[0]

        response = client.get(f"/api/links/{link.id}")
        assert response.status_code == 200
        assert response.json()["id"] == link.id

    @pytest.mark.parametrize("link_id,status_code,body", [
        ("999", 404, {"error": "Link not found"}),
        ("abc", 400, {"error": "Invalid ID format"}),
        ("1_0", 400, {"error": "Invalid ID format"}),
        ("%201", 400, {"error": "Invalid ID format"}),
        ("99999999999", 400, {"error": "Invalid ID format"}),
    ])
    def test_get_link_errors(self, client: TestClient, link_id, status_code, body):
        response = client.get(f"/api/links/{link_id}")
        assert response.status_code == status_code
        assert response.json() == body

    def test_update_link(self, client: TestClient, db_session):
        link = _seed_links(db_session, 1)[0]
        payload = {"original_url": "https://updated.example.com/", "short_name": "updated"}

        response = client.put(f"/api/links/{link.id}", json=payload)
        assert response.status_code == 200
        assert response.json()["original_url"] == payload["original_url"]
        assert response.json()["short_name"] == "updated"

    def test_update_missing_link(self, client: TestClient):
        payload = {"original_url": "https://updated.example.com/", "short_name": "updated"}
        response = client.put("/api/links/999", json=payload)
        assert response.status_code == 404

    def test_delete_link_cascades_visits(self, client: TestClient, db_session):
        link = _seed_links(db_session, 1)[0]
        VisitService(db_session).insert_visit(VisitEvent(link_id=link.id, ip="10.0.0.1", status=302))

        response = client.delete(f"/api/links/{link.id}")
        assert response.status_code == 204

        assert client.get(f"/api/links/{link.id}").status_code == 404
        assert VisitService(db_session).count_visits() == 0

    def test_delete_missing_link(self, client: TestClient):
        assert client.delete("/api/links/999").status_code == 404


class TestLinkValidation:
    """Error body formatting for invalid input"""

    def test_invalid_json(self, client: TestClient):
        response = client.post(
            "/api/links",
            content="{invalid json}",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "invalid request"}

    @pytest.mark.parametrize("payload,field,message", [
        ({"short_name": "test"}, "original_url", "original_url is required"),
        ({"original_url": "not-a-valid-url"}, "original_url", "must be a valid URL"),
        ({"original_url": "https://example.com/", "short_name": "ab"}, "short_name", "must be at least 3 characters"),
        ({"original_url": "https://example.com/", "short_name": "a" * 33}, "short_name", "must be at most 32 characters"),
        ({"original_url": "https://example.com/", "short_name": "bad name!"}, "short_name", "must contain only letters, digits, '-' or '_'"),
    ])
    def test_field_errors(self, client: TestClient, payload, field, message):
        response = client.post("/api/links", json=payload)
        assert response.status_code == 422
        assert response.json()["errors"][field] == message

    def test_update_requires_short_name(self, client: TestClient, db_session):
        link = _seed_links(db_session, 1)[0]

        response = client.put(f"/api/links/{link.id}", json={"original_url": "https://example.com/"})
        assert response.status_code == 422
        assert "short_name" in response.json()["errors"]

    def test_duplicate_short_name(self, client: TestClient, db_session):
        _seed_links(db_session, 1)

        response = client.post("/api/links", json={"original_url": "https://example.com/", "short_name": "link000"})
        assert response.status_code == 422
        assert response.json() == {"errors": {"short_name": "short name already in use"}}

    def test_update_to_taken_short_name(self, client: TestClient, db_session):
        first, second = _seed_links(db_session, 2)

        response = client.put(
            f"/api/links/{second.id}",
            json={"original_url": "https://example.com/", "short_name": first.short_name},
        )
        assert response.status_code == 422
        assert response.json()["errors"]["short_name"] == "short name already in use"


class TestLinkListing:
    """GET /api/links with and without range"""

    def test_without_range_returns_everything(self, client: TestClient, db_session):
        _seed_links(db_session, 15)

        response = client.get("/api/links")
        assert response.status_code == 200
        assert len(response.json()) == 15
        assert "content-range" not in response.headers

    @pytest.mark.parametrize("range_param,expected_count,expected_header", [
        ("[0,10]", 10, "links 0-9/15"),
        ("[10,20]", 5, "links 10-14/15"),
        ("[5,15]", 10, "links 5-14/15"),
        ("[5,5]", 0, "links 5-4/15"),
    ])
    def test_range_window(self, client: TestClient, db_session, range_param, expected_count, expected_header):
        _seed_links(db_session, 15)

        response = client.get("/api/links", params={"range": range_param})
        assert response.status_code == 200
        assert len(response.json()) == expected_count
        assert response.headers["content-range"] == expected_header

    def test_window_order_follows_ids(self, client: TestClient, db_session):
        links = _seed_links(db_session, 5)

        response = client.get("/api/links", params={"range": "[1,3]"})
        assert [item["id"] for item in response.json()] == [links[1].id, links[2].id]

    def test_range_on_empty_collection(self, client: TestClient):
        response = client.get("/api/links", params={"range": "[0,10]"})
        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["content-range"] == "links */0"

    @pytest.mark.parametrize("range_param", [
        "[10,5]", "[-1,5]", "invalid", "0,10", "[a,b]", "[0,99999999999999999999]",
    ])
    def test_invalid_range_rejected_before_storage(self, client: TestClient, monkeypatch, range_param):
        def must_not_be_called(*args, **kwargs):
            raise AssertionError("storage touched for an invalid range")

        monkeypatch.setattr(LinkService, "count_links", must_not_be_called)
        monkeypatch.setattr(LinkService, "list_links", must_not_be_called)

        response = client.get("/api/links", params={"range": range_param})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid range parameter")
