"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from globalpoll.db.models.poll import Poll  # noqa: F401, E402
from globalpoll.db.models.vote import Vote  # noqa: F401, E402
from globalpoll.db.models.comment import Comment  # noqa: F401, E402
from globalpoll.db.models.admin import Admin  # noqa: F401, E402
