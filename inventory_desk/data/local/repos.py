from sqlalchemy import select

from inventory_desk.data.local.models import AuthUserRecord, UserRole


class AuthUserRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, user_id: str):
        return self.db.get(AuthUserRecord, user_id)

    def get_by_email(self, email: str):
        stmt = select(AuthUserRecord).where(AuthUserRecord.email == email.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def create(self, user: AuthUserRecord):
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user


class UserRoleRepository:
    def __init__(self, db):
        self.db = db

    def has_role(self, user_id: str, role: str) -> bool:
        stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role)
        return self.db.execute(stmt).first() is not None

    def grant(self, user_id: str, role: str) -> UserRole:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        existing = self.db.execute(stmt).scalars().first()
        if existing:
            return existing
        assignment = UserRole(user_id=user_id, role=role)
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        return assignment
