# sitebuilder/models/soft_delete_mixin.py
from sitebuilder.extensions import db
from .base import utc_now

class SoftDeleteMixin:
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    def soft_delete(self):
        self.deleted_at = utc_now()

    @property
    def is_deleted(self):
        return self.deleted_at is not None
