from sqlalchemy.orm import sessionmaker

from inventory_desk.data.local.models import AuthUserRecord
from inventory_desk.data.local.policies import ADMIN_ROLE
from inventory_desk.data.local.repos import AuthUserRepository, UserRoleRepository
from inventory_desk.data.local.security import get_password_hash


def seed_user(session_factory: sessionmaker, email: str, password: str, roles: tuple[str, ...] = (ADMIN_ROLE,)) -> str:
    """Create the user when missing and grant the given roles. Returns the user id."""
    with session_factory() as db:
        users = AuthUserRepository(db)
        user = users.get_by_email(email)
        if user is None:
            user = users.create(
                AuthUserRecord(email=email.strip().lower(), hashed_password=get_password_hash(password))
            )
        role_repo = UserRoleRepository(db)
        for role in roles:
            role_repo.grant(user.id, role)
        return user.id
