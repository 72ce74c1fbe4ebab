"""
Initial storefront schema.

Creates every table declared in ``storefront.db.models`` as of the first
release: settings, catalog, pages and global content, reviews, blog, custom
popups, CRM contacts/activity/inbox, analytics, admin auth and the media
library. Later schema changes get their own explicit revisions.
"""

from typing import Sequence, Union

from alembic import op

from storefront.db.models import Base

# Alembic revision identifiers
revision: str = '20260101_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    Base.metadata.create_all(bind=op.get_bind(), checkfirst=True)


def downgrade() -> None:
    Base.metadata.drop_all(bind=op.get_bind(), checkfirst=True)
