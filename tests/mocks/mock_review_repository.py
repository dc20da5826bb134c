# tests/mocks/mock_review_repository.py
import uuid
from typing import List, Optional

from app.models.review_model import Review


class FakeReviewRepository:
    """In-memory stand-in for ReviewRepository."""

    def __init__(self, initial_reviews: List[Review] = None):
        self.reviews = initial_reviews or []
        self.calls = 0

    async def get(self, db, *, obj_id: uuid.UUID) -> Optional[Review]:
        self.calls += 1
        for review in self.reviews:
            if review.id == obj_id:
                return review
        return None

    async def get_active(self, db, *, review_id: uuid.UUID) -> Optional[Review]:
        review = await self.get(db, obj_id=review_id)
        if review is None or review.is_deleted:
            return None
        return review
