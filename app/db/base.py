# Imports every model so Base.metadata is complete for create_all and alembic
from app.db.base_class import Base  # noqa: F401
from app.models.secret import Secret  # noqa: F401
from app.models.user import User  # noqa: F401
