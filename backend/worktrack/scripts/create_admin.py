"""Bootstrap the first admin account.

Usage: python -m worktrack.scripts.create_admin admin@example.com 'S3cret!pass' "System Admin"
"""
import logging
import sys

from worktrack.core.enums import Role
from worktrack.core.logging_config import configure_logging
from worktrack.core.security import hash_password
from worktrack.database.base import Base
from worktrack.database.session import SessionLocal, engine
from worktrack.main import app  # noqa: F401  registers every model on Base
from worktrack.models.profile import Profile

logger = logging.getLogger(__name__)


def create_admin(email: str, password: str, full_name: str = "System Admin") -> bool:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing_admin = db.query(Profile).filter(Profile.role == Role.ADMIN).first()
        if existing_admin:
            logger.info("Admin already exists (%s)", existing_admin.email)
            return False

        admin = Profile(
            email=email.strip().lower(),
            full_name=full_name,
            password_hash=hash_password(password),
            role=Role.ADMIN,
            employee_id="ADMIN0001",
            force_password_change=False,
        )
        db.add(admin)
        db.commit()
        logger.info("Admin %s created", admin.email)
        return True
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    if len(sys.argv) < 3:
        sys.exit(__doc__)
    create_admin(*sys.argv[1:4])
