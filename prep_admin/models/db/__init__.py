"""Database models."""
from prep_admin.models.db.user import AdminAccount
from prep_admin.models.db.document import DocumentRecord

__all__ = [
    "AdminAccount",
    "DocumentRecord",
]
