"""Content routes — posts, answers, accepted answers, listings, reports.

Tests cover:
    - Every write requires an identity (401 naming the action)
    - Schema violations → 400 VALIDATION_ERROR with field details
    - Moderation rejection → 400, nothing written
    - Unknown course/post → 404
    - One anonymous post per UTC day
    - Only the post author accepts; the answer must belong to the post
    - Duplicate report → 400 DUPLICATE_REPORT
"""

import uuid

from sqlalchemy import func, select

from studyfront.models.course import CourseMembership
from studyfront.models.listing import Listing
from studyfront.models.post import Post, PostAccept
from tests.services.fakes import USER, as_user


def _post_body(course_id, **overrides) -> dict:
    body = {
        "courseId": str(course_id),
        "title": "What is dynamic programming?",
        "body": "I keep hearing the term in lectures and want an example.",
        "tags": ["algorithms"],
    }
    body.update(overrides)
    return body


def _listing_body(**overrides) -> dict:
    body = {
        "title": "Mini fridge",
        "description": "Works well, fits under a dorm desk.",
        "category": "furniture",
        "priceCents": 4000,
        "condition": "like_new",
        "pickupArea": "Main Campus - Dorms",
        "imagePaths": ["listings/fridge-1.jpg", "listings/fridge-2.jpg"],
    }
    body.update(overrides)
    return body


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(
            select(func.count()).select_from(model),
        )).scalar_one()


async def _create_post(client, course_id, user_id=USER, **overrides) -> dict:
    response = await client.post(
        "/api/v1/posts", json=_post_body(course_id, **overrides),
        headers=as_user(user_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _create_answer(client, post_id, user_id="helper-9") -> dict:
    response = await client.post(
        "/api/v1/answers",
        json={"postId": post_id, "body": "Break it into overlapping subproblems."},
        headers=as_user(user_id),
    )
    assert response.status_code == 201, response.text
    return response.json()


# ─── Posts ───────────────────────────────────────────────────────

async def test_create_post_joins_course(client, test_session_factory, seed_course):
    data = await _create_post(client, seed_course.id)

    assert data["authorId"] == USER
    assert data["courseId"] == str(seed_course.id)
    assert data["isAnon"] is False
    assert await _count(test_session_factory, CourseMembership) == 1

    await _create_post(client, seed_course.id, title="Second question here")
    assert await _count(test_session_factory, CourseMembership) == 1


async def test_create_post_requires_identity(client, seed_course):
    response = await client.post("/api/v1/posts", json=_post_body(seed_course.id))
    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "UNAUTHORIZED"
    assert error["message"] == "Authentication required to create posts"


async def test_create_post_validation(client, seed_course):
    response = await client.post(
        "/api/v1/posts",
        json=_post_body(seed_course.id, title="Hey", tags=["a", "b", "c", "d", "e", "f"]),
        headers=as_user(),
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in error["details"]}
    assert fields == {"body.title", "body.tags"}


async def test_create_post_unknown_course(client, missing_course_id):
    response = await client.post(
        "/api/v1/posts", json=_post_body(missing_course_id), headers=as_user(),
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_flagged_post_not_written(client, test_session_factory, seed_course):
    response = await client.post(
        "/api/v1/posts",
        json=_post_body(seed_course.id, body="Click this phishing link for answers"),
        headers=as_user(),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MODERATION_REJECTED"
    assert await _count(test_session_factory, Post) == 0
    assert await _count(test_session_factory, CourseMembership) == 0


async def test_one_anonymous_post_per_day(client, seed_course):
    first = await _create_post(client, seed_course.id, isAnon=True)
    assert first["isAnon"] is True

    response = await client.post(
        "/api/v1/posts",
        json=_post_body(seed_course.id, title="Another anonymous one", isAnon=True),
        headers=as_user(),
    )
    assert response.status_code == 429
    error = response.json()["error"]
    assert error["message"] == "You can only post 1 anonymous question per day"
    assert error["details"]["limit"] == 1

    # Named posts are unaffected, and so are other identities
    await _create_post(client, seed_course.id, title="Named follow-up")
    await _create_post(client, seed_course.id, user_id="other-7", isAnon=True)


# ─── Answers ─────────────────────────────────────────────────────

async def test_create_answer(client, test_session_factory, seed_course):
    post = await _create_post(client, seed_course.id)
    answer = await _create_answer(client, post["id"])

    assert answer["postId"] == post["id"]
    assert answer["authorId"] == "helper-9"
    assert await _count(test_session_factory, CourseMembership) == 2


async def test_answer_unknown_post(client):
    response = await client.post(
        "/api/v1/answers",
        json={"postId": str(uuid.uuid4()), "body": "An answer to nothing at all."},
        headers=as_user(),
    )
    assert response.status_code == 404


async def test_answer_requires_identity(client):
    response = await client.post(
        "/api/v1/answers",
        json={"postId": str(uuid.uuid4()), "body": "An answer to nothing at all."},
    )
    assert response.status_code == 401


# ─── Accept ──────────────────────────────────────────────────────

async def test_author_accepts_and_changes_answer(client, test_session_factory, seed_course):
    post = await _create_post(client, seed_course.id)
    first = await _create_answer(client, post["id"])
    second = await _create_answer(client, post["id"], user_id="helper-10")

    for answer in (first, second):
        response = await client.post(
            "/api/v1/posts/accept",
            json={"postId": post["id"], "answerId": answer["id"]},
            headers=as_user(),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

    async with test_session_factory() as session:
        accepts = (await session.execute(select(PostAccept))).scalars().all()
        assert [str(a.accepted_answer_id) for a in accepts] == [second["id"]]


async def test_only_author_accepts(client, seed_course):
    post = await _create_post(client, seed_course.id)
    answer = await _create_answer(client, post["id"])

    response = await client.post(
        "/api/v1/posts/accept",
        json={"postId": post["id"], "answerId": answer["id"]},
        headers=as_user("helper-9"),
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


async def test_accept_answer_from_other_post(client, seed_course):
    post = await _create_post(client, seed_course.id)
    other = await _create_post(client, seed_course.id, title="Unrelated question")
    answer = await _create_answer(client, other["id"])

    response = await client.post(
        "/api/v1/posts/accept",
        json={"postId": post["id"], "answerId": answer["id"]},
        headers=as_user(),
    )
    assert response.status_code == 404


# ─── Listings ────────────────────────────────────────────────────

async def test_create_listing(client, test_session_factory):
    response = await client.post(
        "/api/v1/listings", json=_listing_body(), headers=as_user(),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["sellerId"] == USER
    assert data["status"] == "active"
    assert data["imagePaths"] == ["listings/fridge-1.jpg", "listings/fridge-2.jpg"]
    assert await _count(test_session_factory, Listing) == 1


async def test_listing_validation(client):
    cases = [
        _listing_body(priceCents=-1),
        _listing_body(pickupArea="Somewhere else"),
        _listing_body(category="vehicles"),
        _listing_body(imagePaths=[f"img-{i}.jpg" for i in range(6)]),
    ]
    for body in cases:
        response = await client.post("/api/v1/listings", json=body, headers=as_user())
        assert response.status_code == 400, body


async def test_flagged_listing_rejected(client, test_session_factory):
    response = await client.post(
        "/api/v1/listings",
        json=_listing_body(description="Free fridge, just send your bank login. Not spam."),
        headers=as_user(),
    )
    assert response.status_code == 400
    assert await _count(test_session_factory, Listing) == 0


async def test_listing_requires_identity(client):
    response = await client.post("/api/v1/listings", json=_listing_body())
    assert response.status_code == 401


# ─── Reports ─────────────────────────────────────────────────────

async def test_duplicate_report_rejected(client):
    body = {
        "targetType": "listing",
        "targetId": str(uuid.uuid4()),
        "reason": "Seller asked for payment outside the app, looks like a scam.",
    }
    response = await client.post("/api/v1/reports", json=body, headers=as_user())
    assert response.status_code == 201
    assert response.json()["targetType"] == "listing"

    response = await client.post("/api/v1/reports", json=body, headers=as_user())
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "DUPLICATE_REPORT"

    response = await client.post("/api/v1/reports", json=body, headers=as_user("other-7"))
    assert response.status_code == 201


async def test_report_requires_identity_and_valid_reason(client):
    body = {"targetType": "post", "targetId": str(uuid.uuid4()), "reason": "short"}
    assert (await client.post("/api/v1/reports", json=body)).status_code == 401
    response = await client.post("/api/v1/reports", json=body, headers=as_user())
    assert response.status_code == 400
