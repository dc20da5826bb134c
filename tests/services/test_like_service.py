# tests/services/test_like_service.py
import uuid

import pytest
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import ResourceNotFound
from app.crud.like_crud import LikeRepository
from app.models.like_model import Like
from app.models.review_model import Review
from app.models.user_model import User
from app.services.like_service import LikeService

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


class RacingLikeRepository(LikeRepository):
    """
    Simulates a concurrent toggle: the first conditional delete misses even
    though another request has already inserted the like.
    """

    def __init__(self):
        super().__init__()
        self.delete_calls = 0

    async def delete_by_user_and_review(self, db, *, user_id, review_id) -> int:
        self.delete_calls += 1
        if self.delete_calls == 1:
            return 0
        return await super().delete_by_user_and_review(
            db, user_id=user_id, review_id=review_id
        )


@pytest.fixture
def like_service() -> LikeService:
    return LikeService()


async def count_likes(db: AsyncSession, review_id: uuid.UUID) -> int:
    statement = select(func.count()).select_from(Like).where(Like.review_id == review_id)
    return (await db.execute(statement)).scalar_one()


# ==================== TOGGLE ====================


async def test_toggle_likes_then_unlikes(
    db_session: AsyncSession, like_service: LikeService, active_user: User, review: Review
):
    """
    Test case: Two toggles leave the pair as it started.
    - GIVEN a user who has not liked a review.
    - WHEN toggle_like is called twice.
    - THEN the first call likes, the second unlikes and no row remains.
    """
    first = await like_service.toggle_like(
        db_session, review_id=str(review.id), user_id=active_user.id
    )
    assert first.liked is True
    assert first.message == "Review liked successfully"
    assert await count_likes(db_session, review.id) == 1

    second = await like_service.toggle_like(
        db_session, review_id=str(review.id), user_id=active_user.id
    )
    assert second.liked is False
    assert second.message == "Review unliked successfully"
    assert await count_likes(db_session, review.id) == 0


async def test_toggle_unknown_review(
    db_session: AsyncSession, like_service: LikeService, active_user: User
):
    with pytest.raises(ResourceNotFound, match="Review not found"):
        await like_service.toggle_like(
            db_session, review_id="missing-review", user_id=active_user.id
        )


async def test_toggle_deleted_review(
    db_session: AsyncSession,
    like_service: LikeService,
    active_user: User,
    deleted_review: Review,
):
    with pytest.raises(ResourceNotFound, match="Review not found"):
        await like_service.toggle_like(
            db_session, review_id=deleted_review.id, user_id=active_user.id
        )


async def test_toggle_by_inactive_user(
    db_session: AsyncSession, like_service: LikeService, inactive_user: User, review: Review
):
    review_id = review.id
    with pytest.raises(ResourceNotFound, match="User not found or inactive"):
        await like_service.toggle_like(
            db_session, review_id=review_id, user_id=inactive_user.id
        )
    assert await count_likes(db_session, review_id) == 0


async def test_toggle_that_loses_insert_race_becomes_unlike(
    db_session: AsyncSession, like_service: LikeService, active_user: User, review: Review
):
    """
    Test case: The insert collides with a like written concurrently.
    - GIVEN a like inserted by a competing request after our delete ran.
    - WHEN the insert hits the uniqueness constraint.
    - THEN the toggle is retried as an unlike and reports liked=False.
    """
    user_id, review_id = active_user.id, review.id
    db_session.add(Like(user_id=user_id, review_id=review_id))
    await db_session.commit()

    racing = RacingLikeRepository()
    like_service.like_repository = racing

    result = await like_service.toggle_like(db_session, review_id=review_id, user_id=user_id)

    assert result.liked is False
    assert racing.delete_calls == 2
    assert await count_likes(db_session, review_id) == 0


# ==================== READ ====================


async def test_get_review_likes_with_users(
    db_session: AsyncSession,
    like_service: LikeService,
    active_user: User,
    second_user: User,
    review: Review,
):
    await like_service.toggle_like(db_session, review_id=review.id, user_id=active_user.id)
    await like_service.toggle_like(db_session, review_id=review.id, user_id=second_user.id)

    result = await like_service.get_review_likes(db_session, review_id=review.id, page=1, limit=1)

    assert len(result.likes) == 1
    assert result.likes[0].user is not None
    assert result.pagination.page == 1
    assert result.pagination.limit == 1
    assert result.pagination.total == 2
    assert result.pagination.total_pages == 2


async def test_get_review_likes_empty(
    db_session: AsyncSession, like_service: LikeService, review: Review
):
    result = await like_service.get_review_likes(db_session, review_id=review.id)

    assert result.likes == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0


async def test_get_review_likes_page_beyond_last(
    db_session: AsyncSession, like_service: LikeService, active_user: User, review: Review
):
    await like_service.toggle_like(db_session, review_id=review.id, user_id=active_user.id)

    result = await like_service.get_review_likes(db_session, review_id=review.id, page=4, limit=10)

    assert result.likes == []
    assert result.pagination.page == 4
    assert result.pagination.total == 1


async def test_get_review_likes_unknown_review(db_session: AsyncSession, like_service: LikeService):
    with pytest.raises(ResourceNotFound, match="Review not found"):
        await like_service.get_review_likes(db_session, review_id=uuid.uuid4())


async def test_check_user_like(
    db_session: AsyncSession, like_service: LikeService, active_user: User, review: Review
):
    before = await like_service.check_user_like(
        db_session, review_id=review.id, user_id=active_user.id
    )
    assert before.has_liked is False
    assert before.liked_at is None

    await like_service.toggle_like(db_session, review_id=review.id, user_id=active_user.id)

    after = await like_service.check_user_like(
        db_session, review_id=str(review.id), user_id=active_user.id
    )
    assert after.has_liked is True
    assert after.liked_at is not None


async def test_check_user_like_malformed_ids(db_session: AsyncSession, like_service: LikeService):
    result = await like_service.check_user_like(
        db_session, review_id="missing-review", user_id="nobody"
    )
    assert result.has_liked is False


async def test_like_count(
    db_session: AsyncSession,
    like_service: LikeService,
    active_user: User,
    second_user: User,
    review: Review,
):
    await like_service.toggle_like(db_session, review_id=review.id, user_id=active_user.id)
    await like_service.toggle_like(db_session, review_id=review.id, user_id=second_user.id)

    result = await like_service.get_review_like_count(db_session, review_id=review.id)
    assert result.like_count == 2
