"""
HTTP tests through the gateway: auth, envelopes, errors and the main flows.
"""
from conftest import drain_queue, signup

ARTICLE = (
    "Deployments must go through the staging cluster first. "
    "Rollbacks should be rehearsed every quarter by the on-call team. "
    "The release checklist lives in the platform handbook."
)


def create_card(client, headers, **overrides):
    body = {"title": "Kafka consumer tuning", "content": "Batch size and linger settings for consumers.",
            "tags": ["kafka"], "category": "engineering"}
    body.update(overrides)
    response = client.post("/cards", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["summarizer"] == "heuristic"

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert client.get("/").headers.get("X-Request-ID")


class TestAuth:
    """Signup, login and token checks"""

    def test_signup_login_me(self, client):
        account = signup(client, "Grace")
        assert "password_hash" not in account["user"]

        login = client.post("/auth/login", json={"email": "GRACE@example.com", "password": "secret123"})
        assert login.status_code == 200
        token = login.json()["data"]["token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "grace@example.com"

    def test_duplicate_email(self, client):
        signup(client, "Grace")
        response = client.post("/auth/signup", json={"name": "G", "email": "grace@example.com", "password": "secret123"})
        assert response.status_code == 409
        assert response.json()["code"] == "EMAIL_TAKEN"

    def test_bad_password(self, client):
        signup(client, "Grace")
        response = client.post("/auth/login", json={"email": "grace@example.com", "password": "wrong-pass"})
        assert response.status_code == 401

    def test_missing_and_invalid_token(self, client):
        missing = client.get("/auth/me")
        assert missing.status_code == 401
        assert missing.json()["code"] == "UNAUTHORIZED"

        invalid = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert invalid.status_code == 401
        assert invalid.json()["code"] == "INVALID_TOKEN"

    def test_error_body_shape(self, client):
        response = client.get("/auth/me")
        body = response.json()
        assert body["success"] is False
        assert body["error"]
        assert body["path"] == "/auth/me"
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_validation_error(self, client):
        response = client.post("/auth/signup", json={"name": "", "email": "x", "password": "1"})
        assert response.status_code == 422

    def test_versioned_prefix(self, client):
        account = signup(client, "Grace")
        response = client.get("/api/v1/auth/me", headers=account["headers"])
        assert response.status_code == 200

    def test_preferences(self, client):
        account = signup(client, "Grace")
        response = client.patch(
            "/auth/me/preferences", json={"favorite_topics": ["kafka"]}, headers=account["headers"]
        )
        assert response.status_code == 200
        assert response.json()["data"]["preferences"]["favorite_topics"] == ["kafka"]


class TestDocuments:
    def test_upload_and_summarize(self, client):
        account = signup(client)
        workspace = client.post("/workspaces", json={"name": "Platform"}, headers=account["headers"]).json()["data"]

        upload = client.post(
            f"/workspaces/{workspace['id']}/documents",
            files={"file": ("release.txt", ARTICLE.encode(), "text/plain")},
            data={"title": "Release process", "tags": "ops, release"},
            headers=account["headers"],
        )
        assert upload.status_code == 201, upload.text
        doc = upload.json()["data"]
        assert doc["tags"] == ["ops", "release"]

        response = client.post(f"/documents/{doc['id']}/summarize", headers=account["headers"])

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["summary"].startswith("Deployments must go through the staging cluster first")
        assert body["points"]
        assert "data" not in body

        stored = client.get(f"/documents/{doc['id']}", headers=account["headers"]).json()["data"]
        assert stored["summary"]["content"] == body["summary"]

    def test_summarize_errors(self, client):
        owner = signup(client, "Owner")
        outsider = signup(client, "Outsider")
        workspace = client.post("/workspaces", json={"name": "Private"}, headers=owner["headers"]).json()["data"]
        doc = client.post(
            f"/workspaces/{workspace['id']}/documents",
            files={"file": ("release.txt", ARTICLE.encode(), "text/plain")},
            headers=owner["headers"],
        ).json()["data"]

        denied = client.post(f"/documents/{doc['id']}/summarize", headers=outsider["headers"])
        assert denied.status_code == 403
        assert denied.json()["code"] == "WORKSPACE_ACCESS_DENIED"

        invalid = client.post("/documents/not-an-id/summarize", headers=owner["headers"])
        assert invalid.status_code == 400
        assert invalid.json()["code"] == "INVALID_ID"

        empty = client.post(
            f"/workspaces/{workspace['id']}/documents",
            files={"file": ("empty.txt", b"", "text/plain")},
            headers=owner["headers"],
        )
        assert empty.status_code == 400
        assert empty.json()["code"] == "FILE_EMPTY"


class TestCardsAndInteractions:
    def test_private_card_hidden_from_others(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"], visibility="private")

        assert client.get(f"/cards/{card['id']}", headers=author["headers"]).status_code == 200
        assert client.get(f"/cards/{card['id']}", headers=reader["headers"]).status_code == 404
        assert client.get(f"/cards/{card['id']}").status_code == 404

    def test_shared_card_needs_sign_in(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"], visibility="shared")

        assert client.get(f"/cards/{card['id']}", headers=reader["headers"]).status_code == 200
        assert client.get(f"/cards/{card['id']}").status_code == 404

    def test_only_author_updates(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"])

        assert client.patch(f"/cards/{card['id']}", json={"title": "New"}, headers=reader["headers"]).status_code == 403
        updated = client.patch(f"/cards/{card['id']}", json={"title": "New"}, headers=author["headers"])
        assert updated.json()["data"]["title"] == "New"

    def test_like_flow_and_notification(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"])

        liked = client.post(f"/cards/{card['id']}/like", headers=reader["headers"])
        assert liked.status_code == 201
        assert liked.json()["data"]["like_count"] == 1

        again = client.post(f"/cards/{card['id']}/like", headers=reader["headers"])
        assert again.status_code == 400
        assert again.json()["code"] == "ALREADY_LIKED"

        drain_queue(client)
        notifications = client.get("/notifications", headers=author["headers"]).json()["data"]
        assert notifications["unread_count"] == 1
        assert notifications["notifications"][0]["message"] == 'Reader liked your card "Kafka consumer tuning"'

        read_all = client.patch("/notifications/read-all", headers=author["headers"])
        assert read_all.json()["data"]["modified"] == 1

        unliked = client.delete(f"/cards/{card['id']}/like", headers=reader["headers"])
        assert unliked.json()["data"]["like_count"] == 0
        missing = client.delete(f"/cards/{card['id']}/like", headers=reader["headers"])
        assert missing.status_code == 400
        assert missing.json()["code"] == "NOT_LIKED"

    def test_bookmarks_listed(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"])
        client.post(f"/cards/{card['id']}/bookmark", headers=reader["headers"])

        listing = client.get("/interactions/bookmarks", headers=reader["headers"]).json()["data"]

        assert [c["id"] for c in listing["cards"]] == [card["id"]]


class TestRecommendations:
    def test_trending_counts_views(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"])
        client.get(f"/cards/{card['id']}", headers=reader["headers"])
        client.post(f"/cards/{card['id']}/like", headers=reader["headers"])
        drain_queue(client)

        trending = client.get("/recommendations/trending").json()["data"]

        assert trending[0]["id"] == card["id"]
        assert trending[0]["trend"]["views"] == 1
        assert trending[0]["trend"]["likes"] == 1

    def test_personalized_requires_auth(self, client):
        assert client.get("/recommendations/personalized").status_code == 401

    def test_suggest_is_flat(self, client):
        account = signup(client)
        response = client.post(
            "/recommendations/suggest",
            json={"title": "Kafka consumer lag", "content": "Kafka consumer lag grows when partitions rebalance."},
            headers=account["headers"],
        )

        body = response.json()
        assert response.status_code == 200
        assert "kafka" in body["suggested_tags"]
        assert "suggested_category" in body


class TestAnalyticsLogs:
    def test_log_requires_readable_card(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        private = create_card(client, author["headers"], visibility="private")
        public = create_card(client, author["headers"])

        missing = client.post(
            "/analytics/logs",
            json={"action_type": "share", "card_id": "00000000-0000-0000-0000-000000000000"},
            headers=reader["headers"],
        )
        assert missing.status_code == 404
        assert missing.json()["code"] == "CARD_NOT_FOUND"

        hidden = client.post(
            "/analytics/logs", json={"action_type": "view", "card_id": private["id"]}, headers=reader["headers"]
        )
        assert hidden.status_code == 404

        malformed = client.post(
            "/analytics/logs", json={"action_type": "view", "card_id": "nope"}, headers=reader["headers"]
        )
        assert malformed.status_code == 400
        assert malformed.json()["code"] == "INVALID_ID"

        logs = client.get("/analytics/logs", headers=reader["headers"]).json()["data"]["logs"]
        assert all(log["card_id"] is None for log in logs)

        created = client.post(
            "/analytics/logs", json={"action_type": "share", "card_id": public["id"]}, headers=reader["headers"]
        )
        assert created.status_code == 201
        assert created.json()["data"]["card_id"] == public["id"]

    def test_log_without_card(self, client):
        account = signup(client)
        created = client.post("/analytics/logs", json={"action_type": "search", "metadata": {"q": "kafka"}},
                              headers=account["headers"])
        assert created.status_code == 201
        assert created.json()["data"]["metadata"] == {"q": "kafka"}


class TestProfiles:
    def test_read_and_update_own_profile(self, client):
        ada = signup(client, "Ada")
        bob = signup(client, "Bob")
        ada_id = ada["user"]["id"]

        seen = client.get(f"/users/profile/{ada_id}", headers=bob["headers"])
        assert seen.status_code == 200
        assert seen.json()["data"]["name"] == "Ada"
        assert "password_hash" not in seen.json()["data"]

        updated = client.patch(
            f"/users/profile/{ada_id}",
            json={"name": "Ada L.", "preferences": {"favorite_topics": ["Rust", "rust", "Go"]}},
            headers=ada["headers"],
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["name"] == "Ada L."
        assert updated.json()["data"]["preferences"]["favorite_topics"] == ["rust", "go"]

    def test_cannot_update_someone_else(self, client):
        ada = signup(client, "Ada")
        bob = signup(client, "Bob")

        response = client.patch(f"/users/profile/{ada['user']['id']}", json={"name": "Hacked"}, headers=bob["headers"])

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"
        assert client.get(f"/users/profile/{ada['user']['id']}", headers=bob["headers"]).json()["data"]["name"] == "Ada"

    def test_missing_and_invalid_user(self, client):
        account = signup(client)
        assert client.get("/users/profile/00000000-0000-0000-0000-000000000000", headers=account["headers"]).status_code == 404
        assert client.get("/users/profile/abc", headers=account["headers"]).json()["code"] == "INVALID_ID"
        assert client.get(f"/users/profile/{account['user']['id']}").status_code == 401


class TestRelatedCards:
    def test_related_public_cards(self, client):
        author = signup(client, "Author")
        source = create_card(client, author["headers"])
        sibling = create_card(client, author["headers"], title="Kafka partitions", tags=["kafka"], category="ops")
        create_card(client, author["headers"], title="Gardening", tags=["plants"], category="hobby")
        create_card(client, author["headers"], title="Private kafka", visibility="private")

        response = client.get(f"/cards/{source['id']}/related")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["data"]["cards"]] == [sibling["id"]]

    def test_hidden_source_is_not_found(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        private = create_card(client, author["headers"], visibility="private")

        assert client.get(f"/cards/{private['id']}/related", headers=reader["headers"]).status_code == 404
        assert client.get(f"/cards/{private['id']}/related", headers=author["headers"]).status_code == 200


class TestDeleteReadNotifications:
    def test_deletes_only_read(self, client):
        author = signup(client, "Author")
        reader = signup(client, "Reader")
        card = create_card(client, author["headers"])
        client.post(f"/cards/{card['id']}/like", headers=reader["headers"])
        drain_queue(client)
        client.patch("/notifications/read-all", headers=author["headers"])
        client.post(f"/cards/{card['id']}/bookmark", headers=reader["headers"])
        drain_queue(client)

        response = client.delete("/notifications/read", headers=author["headers"])

        assert response.status_code == 200
        assert response.json()["data"]["deleted_count"] == 1
        remaining = client.get("/notifications", headers=author["headers"]).json()["data"]["notifications"]
        assert [n["type"] for n in remaining] == ["bookmark"]


class TestLinkedDocuments:
    def test_link_requires_http_url(self, client):
        owner = signup(client, "Owner")
        workspace = client.post("/workspaces", json={"name": "Platform"}, headers=owner["headers"]).json()["data"]

        response = client.post(
            f"/workspaces/{workspace['id']}/documents/link",
            json={"title": "Stolen", "file_url": "other-workspace/abc_secret.txt", "file_name": "secret.txt"},
            headers=owner["headers"],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_URL"
