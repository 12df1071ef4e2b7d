"""
HTTP-level tests for the /posts router.
"""
from sqlalchemy.exc import SQLAlchemyError

from groupboard.core.crypto import AESCipher, get_cipher
from groupboard.storage.database import get_aggregate_repo

ALICE = {"X-User-Id": "u-alice"}
BOB = {"X-User-Id": "u-bob"}


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to Groupboard"}


class TestGetPost:

    def test_detail_with_aggregates(self, client, forum):
        response = client.get("/posts/P1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["like_total"] == 3
        assert data["dislike_total"] == 1
        assert data["comment_total"] == 2
        assert data["email"] == "alice@example.com"
        assert data["post"]["pid"] == "P1"
        assert data["post"]["user"]["department"] == "IT"
        assert "email" not in data["post"]["user"]
        assert len(data["post"]["comments"]) == 2
        assert len(data["post"]["likes"]) == 4

    def test_totals_match_raw_records(self, client, forum):
        data = client.get("/posts/P1").json()["data"]

        assert data["like_total"] + data["dislike_total"] == len(data["post"]["likes"])
        assert data["comment_total"] == len(data["post"]["comments"])

    def test_not_found(self, client, forum):
        response = client.get("/posts/P2")

        assert response.status_code == 404
        assert response.json() == {"code": 404, "message": "cannot find Post with id P2", "data": None}

    def test_store_failure_returns_no_partial_detail(self, client, forum):
        class BrokenAggregates:
            def count_likes(self, post_id, sign):
                return 3

            def count_comments(self, post_id):
                raise SQLAlchemyError("comments table locked")

        client.app.dependency_overrides[get_aggregate_repo] = lambda: BrokenAggregates()
        response = client.get("/posts/P1")

        assert response.status_code == 500
        body = response.json()
        assert body["data"] is None
        assert "comments table locked" in body["message"]

    def test_decryption_fault_is_a_server_error(self, client, forum):
        client.app.dependency_overrides[get_cipher] = lambda: AESCipher("rotated-key")
        response = client.get("/posts/P1")

        assert response.status_code == 500
        assert response.json()["data"] is None


class TestListing:

    def test_newest_first(self, client, forum):
        body = client.get("/posts/").json()["data"]

        assert body["total"] == 2
        assert [p["pid"] for p in body["items"]] == ["P3", "P1"]

    def test_oldest_first(self, client, forum):
        body = client.get("/posts/", params={"sort": 1}).json()["data"]
        assert [p["pid"] for p in body["items"]] == ["P1", "P3"]

    def test_popular_includes_counts(self, client, forum):
        items = client.get("/posts/", params={"sort": 2}).json()["data"]["items"]
        p1 = next(item for item in items if item["pid"] == "P1")

        assert p1["user"]["first_name"] == "Alice"
        assert (p1["like_count"], p1["dislike_count"], p1["comment_count"]) == (3, 1, 2)

    def test_unknown_sort_code_is_rejected(self, client, forum):
        assert client.get("/posts/", params={"sort": 7}).status_code == 422

    def test_filter_by_department(self, client, forum):
        body = client.get("/posts/filter/department", params={"department": "IT"}).json()["data"]
        assert [p["pid"] for p in body["items"]] == ["P1"]

    def test_filter_by_topic(self, client, forum):
        body = client.get("/posts/filter/topic", params={"topic": "news"}).json()["data"]
        assert [p["pid"] for p in body["items"]] == ["P3"]

    def test_search(self, client, forum):
        body = client.get("/posts/search", params={"keyword": "PIZZA"}).json()["data"]
        assert [p["pid"] for p in body["items"]] == ["P1"]

    def test_blank_search_keyword(self, client, forum):
        response = client.get("/posts/search", params={"keyword": " "})

        assert response.status_code == 400
        assert response.json()["message"] == "Search keyword cannot be empty"


class TestCreatePost:

    def test_requires_authenticated_user(self, client, forum):
        response = client.post("/posts/", data={"title": "Hi"})

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required"

    def test_empty_title(self, client, forum):
        response = client.post("/posts/", data={"title": ""}, headers=ALICE)

        assert response.status_code == 400
        assert response.json()["message"] == "Content cannot be empty"

    def test_create_with_image(self, client, forum, images_dir):
        response = client.post(
            "/posts/",
            data={"title": "Hello", "description": "First post", "topic": "news"},
            files={"image": ("photo.png", b"png-bytes", "image/png")},
            headers=ALICE,
        )

        assert response.status_code == 200
        post = response.json()["data"]
        assert post["user_id"] == "u-alice"
        assert post["image_url"].startswith("http://testserver/images/")
        stored = post["image_url"].split("/images/")[1]
        assert (images_dir / stored).read_bytes() == b"png-bytes"

        detail = client.get(f"/posts/{post['pid']}").json()["data"]
        assert (detail["like_total"], detail["dislike_total"], detail["comment_total"]) == (0, 0, 0)
        assert detail["email"] == "alice@example.com"


class TestModifyPost:

    def test_missing_post(self, client, forum):
        assert client.put("/posts/P2", data={"title": "x"}, headers=ALICE).status_code == 404

    def test_not_the_author(self, client, forum):
        response = client.put("/posts/P1", data={"title": "Hijacked"}, headers=BOB)

        assert response.status_code == 403
        assert response.json()["message"] == "Request not authorized"
        assert client.get("/posts/P1").json()["data"]["post"]["title"] == "Team Lunch"

    def test_author_updates_fields(self, client, forum):
        response = client.put("/posts/P1", data={"title": "Team Dinner"}, headers=ALICE)

        assert response.status_code == 200
        assert response.json()["message"] == "Post modified"
        post = client.get("/posts/P1").json()["data"]["post"]
        assert post["title"] == "Team Dinner"
        assert post["topic"] == "events"

    def test_new_image_replaces_old(self, client, seeder, images_dir):
        (images_dir / "old.png").write_bytes(b"old")
        seeder.user("u-alice", "Alice", "Martin", email="alice@example.com")
        seeder.post("P9", "u-alice", image_url="http://testserver/images/old.png")

        response = client.put(
            "/posts/P9",
            files={"image": ("new.png", b"new", "image/png")},
            headers=ALICE,
        )

        assert response.status_code == 200
        assert not (images_dir / "old.png").exists()
        image_url = client.get("/posts/P9").json()["data"]["post"]["image_url"]
        assert (images_dir / image_url.split("/images/")[1]).read_bytes() == b"new"

    def test_old_image_that_cannot_be_removed(self, client, seeder, images_dir):
        (images_dir / "stuck.png").mkdir()
        seeder.user("u-alice", "Alice", "Martin", email="alice@example.com")
        seeder.post("P9", "u-alice", image_url="http://testserver/images/stuck.png")

        response = client.put(
            "/posts/P9",
            files={"image": ("new.png", b"new", "image/png")},
            headers=ALICE,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Post modified"
        image_url = client.get("/posts/P9").json()["data"]["post"]["image_url"]
        assert image_url.endswith("_new.png")


class TestDeletePost:

    def test_not_the_author(self, client, forum):
        assert client.delete("/posts/P1", headers=BOB).status_code == 403
        assert client.get("/posts/P1").status_code == 200

    def test_author_deletes(self, client, forum):
        response = client.delete("/posts/P1", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["message"] == "Post deleted"
        assert client.get("/posts/P1").status_code == 404

    def test_missing_post(self, client, forum):
        assert client.delete("/posts/P2", headers=ALICE).status_code == 404

    def test_requires_authenticated_user(self, client, forum):
        assert client.delete("/posts/P1").status_code == 401

    def test_leftover_image_does_not_fail_the_delete(self, client, seeder, images_dir):
        (images_dir / "stuck.png").mkdir()
        seeder.user("u-alice", "Alice", "Martin", email="alice@example.com")
        seeder.post("P9", "u-alice", image_url="http://testserver/images/stuck.png")

        response = client.delete("/posts/P9", headers=ALICE)

        assert response.status_code == 200
        assert response.json()["message"] == "Post deleted"
        assert client.get("/posts/P9").status_code == 404
