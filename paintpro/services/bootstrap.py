"""
First-run data: the owner accounts and a few staff members, created only
when the user table is empty.
"""
from sqlalchemy.orm import Session

from ..auth.security import get_password_hash
from ..config import settings
from ..models.models import Staff, User
from ..logging import structlog


INITIAL_USERS = (
    ("sdovalina", "Santiago Dovalina", "superadmin"),
    ("alexdovalina", "Alex Dovalina", "admin"),
    ("dianashindledecker", "Diana Shindledecker", "admin"),
    ("davidshindledecker", "David Shindledecker", "admin"),
)

SAMPLE_STAFF = (
    {
        "name": "Alex Dovalina",
        "role": "Painter",
        "email": "alex@dovalinapainting.com",
        "phone": "555-1234",
        "skills": ["interior", "exterior"],
        "avatar": "/worker1.svg",
    },
    {
        "name": "Diana Shindledecker",
        "role": "Project Manager",
        "email": "diana@dovalinapainting.com",
        "phone": "555-5678",
        "skills": ["management", "client relations"],
        "avatar": "/worker2.svg",
    },
    {
        "name": "David Shindledecker",
        "role": "Painter",
        "email": "david@dovalinapainting.com",
        "phone": "555-9012",
        "skills": ["commercial", "industrial"],
        "avatar": "/worker3.svg",
    },
)


def seed_initial_data(db: Session) -> bool:
    """Returns True when anything was created."""
    log = structlog.get_logger()
    if db.query(User).count() > 0:
        return False

    hashed = get_password_hash(settings.seed_admin_password)
    for username, name, role in INITIAL_USERS:
        db.add(User(username=username, password=hashed, name=name, role=role))

    if db.query(Staff).count() == 0:
        for member in SAMPLE_STAFF:
            db.add(Staff(availability="available", **member))

    db.commit()
    log.info("initial_data_seeded", users=len(INITIAL_USERS), staff=len(SAMPLE_STAFF))
    return True
