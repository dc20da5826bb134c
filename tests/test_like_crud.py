import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from app.crud.like_crud import like_repository
from app.core.exceptions import InternalServerError, ResourceAlreadyExists
from app.models.like_model import Like
from app.models.review_model import Review
from app.models.user_model import User

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


# ==================== CREATE TESTS ====================


async def test_create_like_success(db_session: AsyncSession, active_user: User, review: Review):
    """
    Test case: Successfully create a like.
    - GIVEN an active user and a review.
    - WHEN the create method is called.
    - THEN the like is flushed and readable in the same session.
    """
    like = await like_repository.create(
        db_session, obj_in=Like(user_id=active_user.id, review_id=review.id)
    )

    assert like.id is not None
    found = await like_repository.get_by_user_and_review(
        db_session, user_id=active_user.id, review_id=review.id
    )
    assert found is not None
    assert found.id == like.id


async def test_create_duplicate_like_fails(
    db_session: AsyncSession, active_user: User, review: Review
):
    """
    Test case: The (user, review) pair is unique at the store level.
    - GIVEN an existing like.
    - WHEN a second like for the same pair is inserted.
    - THEN ResourceAlreadyExists is raised.
    """
    user_id, review_id = active_user.id, review.id
    await like_repository.create(db_session, obj_in=Like(user_id=user_id, review_id=review_id))
    await db_session.commit()

    with pytest.raises(ResourceAlreadyExists):
        await like_repository.create(
            db_session, obj_in=Like(user_id=user_id, review_id=review_id)
        )
    await db_session.rollback()

    assert await like_repository.count_for_review(db_session, review_id=review_id) == 1


async def test_create_like_for_vanished_review_is_not_a_duplicate(
    db_session: AsyncSession, active_user: User
):
    """
    Test case: Only the (user, review) uniqueness counts as a duplicate like.
    - GIVEN a review id with no row behind it (deleted concurrently).
    - WHEN a like is inserted for it.
    - THEN the foreign-key failure surfaces as an internal error, not a conflict.
    """
    user_id = active_user.id

    with pytest.raises(InternalServerError):
        await like_repository.create(
            db_session, obj_in=Like(user_id=user_id, review_id=uuid.uuid4())
        )
    await db_session.rollback()


# ==================== DELETE TESTS ====================


async def test_delete_by_user_and_review_reports_rows(
    db_session: AsyncSession, active_user: User, review: Review
):
    await like_repository.create(
        db_session, obj_in=Like(user_id=active_user.id, review_id=review.id)
    )

    first = await like_repository.delete_by_user_and_review(
        db_session, user_id=active_user.id, review_id=review.id
    )
    second = await like_repository.delete_by_user_and_review(
        db_session, user_id=active_user.id, review_id=review.id
    )

    assert first == 1
    assert second == 0


async def test_delete_by_id(db_session: AsyncSession, active_user: User, review: Review):
    like = await like_repository.create(
        db_session, obj_in=Like(user_id=active_user.id, review_id=review.id)
    )

    assert await like_repository.delete(db_session, obj_id=like.id) == 1
    assert await like_repository.delete(db_session, obj_id=uuid.uuid4()) == 0


# ==================== READ TESTS ====================


async def test_get_many_for_review_newest_first(
    db_session: AsyncSession,
    active_user: User,
    second_user: User,
    review: Review,
    other_review: Review,
):
    """Likes are listed newest first, with users loaded, scoped to one review."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    older = Like(user_id=active_user.id, review_id=review.id, created_at=base)
    newer = Like(
        user_id=second_user.id, review_id=review.id, created_at=base + timedelta(hours=1)
    )
    elsewhere = Like(user_id=active_user.id, review_id=other_review.id, created_at=base)
    db_session.add_all([older, newer, elsewhere])
    await db_session.commit()

    likes, total = await like_repository.get_many_for_review(
        db_session, review_id=review.id, skip=0, limit=10
    )

    assert total == 2
    assert [like.user_id for like in likes] == [second_user.id, active_user.id]
    assert likes[0].user.username == "corner_bakery"


async def test_get_many_for_review_window(
    db_session: AsyncSession, active_user: User, second_user: User, review: Review
):
    db_session.add_all(
        [
            Like(user_id=active_user.id, review_id=review.id),
            Like(user_id=second_user.id, review_id=review.id),
        ]
    )
    await db_session.commit()

    page, total = await like_repository.get_many_for_review(
        db_session, review_id=review.id, skip=1, limit=1
    )
    beyond, _ = await like_repository.get_many_for_review(
        db_session, review_id=review.id, skip=2, limit=1
    )

    assert total == 2
    assert len(page) == 1
    assert beyond == []


async def test_count_for_unknown_review_is_zero(db_session: AsyncSession):
    assert await like_repository.count_for_review(db_session, review_id=uuid.uuid4()) == 0
