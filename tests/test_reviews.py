"""
DevCamper API — Review Endpoint Tests
======================================

What we test:
    ✅ users review bootcamps; averageRating follows every write
    ✅ publishers cannot review (403)
    ✅ one review per user per bootcamp (409)
    ✅ only the author (or an admin) may edit or delete
"""

import pytest

REVIEW = {"title": "Learned a ton", "text": "Great instructors and projects", "rating": 8}


async def _bootcamp_rating(client, bootcamp_id):
    body = (await client.get(f"/api/v1/bootcamps/{bootcamp_id}")).json()
    return body["data"]["averageRating"]


class TestCreateReview:
    @pytest.mark.asyncio
    async def test_user_reviews(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        alice = await make_user(role="user")
        bob = await make_user(role="user")

        response = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(alice)
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["rating"] == 8
        assert data["user"] == str(alice.id)
        assert data["bootcamp"] == str(bootcamp.id)
        assert await _bootcamp_rating(client, bootcamp.id) == 8

        await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews",
            json={**REVIEW, "rating": 3},
            headers=auth_headers(bob),
        )
        assert await _bootcamp_rating(client, bootcamp.id) == pytest.approx(5.5)

    @pytest.mark.asyncio
    async def test_second_review_is_conflict(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        user = await make_user(role="user")
        url = f"/api/v1/bootcamps/{bootcamp.id}/reviews"

        assert (await client.post(url, json=REVIEW, headers=auth_headers(user))).status_code == 201
        response = await client.post(url, json=REVIEW, headers=auth_headers(user))
        assert response.status_code == 409
        assert response.json()["error"] == "Duplicate field value entered"

    @pytest.mark.asyncio
    async def test_publisher_forbidden(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        response = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(owner)
        )
        assert response.status_code == 403
        assert response.json()["error"] == "User role publisher is not authorized to access this route"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 11])
    async def test_rating_out_of_range(self, client, make_user, make_bootcamp, auth_headers, rating):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        user = await make_user(role="user")
        response = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews",
            json={**REVIEW, "rating": rating},
            headers=auth_headers(user),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_bootcamp(self, client, make_user, auth_headers):
        user = await make_user(role="user")
        missing = "00000000-0000-0000-0000-000000000000"
        response = await client.post(
            f"/api/v1/bootcamps/{missing}/reviews", json=REVIEW, headers=auth_headers(user)
        )
        assert response.status_code == 404
        assert response.json()["error"] == f"No bootcamp with the id of {missing}"


class TestReadReviews:
    @pytest.mark.asyncio
    async def test_nested_list_and_detail(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner, name="Listed Camp")
        user = await make_user(role="user")
        created = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(user)
        )
        review_id = created.json()["data"]["id"]

        nested = (await client.get(f"/api/v1/bootcamps/{bootcamp.id}/reviews")).json()
        assert nested["count"] == 1
        assert nested["data"][0]["id"] == review_id

        detail = (await client.get(f"/api/v1/reviews/{review_id}")).json()["data"]
        assert detail["bootcamp"]["name"] == "Listed Camp"

        listed = (await client.get("/api/v1/reviews?rating[gte]=5")).json()
        assert listed["count"] == 1

    @pytest.mark.asyncio
    async def test_unknown_review(self, client):
        missing = "00000000-0000-0000-0000-000000000000"
        response = await client.get(f"/api/v1/reviews/{missing}")
        assert response.status_code == 404
        assert response.json()["error"] == f"No review found with the id of {missing}"


class TestModifyReview:
    @pytest.mark.asyncio
    async def test_author_updates_and_deletes(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        user = await make_user(role="user")
        created = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(user)
        )
        review_id = created.json()["data"]["id"]

        updated = await client.put(
            f"/api/v1/reviews/{review_id}", json={"rating": 2}, headers=auth_headers(user)
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["rating"] == 2
        assert updated.json()["data"]["title"] == REVIEW["title"]
        assert await _bootcamp_rating(client, bootcamp.id) == 2

        deleted = await client.delete(f"/api/v1/reviews/{review_id}", headers=auth_headers(user))
        assert deleted.status_code == 200
        assert await _bootcamp_rating(client, bootcamp.id) == 0

    @pytest.mark.asyncio
    async def test_other_user_forbidden(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        author = await make_user(role="user")
        other = await make_user(role="user")
        created = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(author)
        )
        review_id = created.json()["data"]["id"]

        response = await client.delete(f"/api/v1/reviews/{review_id}", headers=auth_headers(other))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_may_edit(self, client, make_user, make_bootcamp, auth_headers):
        owner = await make_user(role="publisher")
        bootcamp = await make_bootcamp(owner)
        author = await make_user(role="user")
        admin = await make_user(role="admin")
        created = await client.post(
            f"/api/v1/bootcamps/{bootcamp.id}/reviews", json=REVIEW, headers=auth_headers(author)
        )
        review_id = created.json()["data"]["id"]

        response = await client.put(
            f"/api/v1/reviews/{review_id}", json={"title": "Moderated"}, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Moderated"
