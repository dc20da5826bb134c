# Import every table model so SQLModel.metadata knows about it.
from app.models.user_model import User  # noqa: F401
from app.models.review_model import Review  # noqa: F401
from app.models.like_model import Like  # noqa: F401
from app.models.comment_model import Comment  # noqa: F401
