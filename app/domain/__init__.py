from app.domain.project_member_operations import project_member_ops
from app.domain.project_operations import project_ops
from app.domain.user_operations import user_ops

__all__ = [
    "project_ops",
    "project_member_ops",
    "user_ops",
]
