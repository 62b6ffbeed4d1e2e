from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.base_model import Base, utcnow
from models.user import User
from models.chirp import Chirp
from models.refresh_token import RefreshToken
from utils.errors import conflict, internal, bad_request

logger = logging.getLogger("chirpy.storage")

# Map model names for easy querying
classes = {
    "User": User,
    "Chirp": Chirp,
    "RefreshToken": RefreshToken,
}

SORT_ORDERS = ("asc", "desc")


def _is_unique_violation(err: IntegrityError) -> bool:
    message = str(getattr(err, "orig", err)).lower()
    return "unique constraint" in message or "unique violation" in message or "duplicate key" in message


class DBStorage:
    """
    Thin wrapper around a scoped SQLAlchemy session.
    The engine is built from an explicit URL handed over by the app factory.
    """
    __engine = None
    __session = None

    def configure(self, database_url: str, echo: bool = False):
        """Build the engine for `database_url`; call reload() afterwards."""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        self.__engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
        if self.__engine.url.get_backend_name() == "sqlite":
            # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        if self.__engine is None:
            raise RuntimeError("DBStorage.configure() must be called before reload()")
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session

    # --- users ---

    def get_user(self, user_id: str) -> Optional[User]:
        return self.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.__session.query(User).filter(User.email == email).first()

    def create_user(self, email: str, password_hash: str) -> User:
        if self.get_user_by_email(email):
            raise conflict("Email already registered")
        user = User(email=email, password_hash=password_hash)
        self.new(user)
        try:
            self.save()
        except IntegrityError as err:
            # lost a race against a concurrent registration
            if _is_unique_violation(err):
                raise conflict("Email already registered")
            raise internal("Could not create user")
        return user

    def update_user(self, user_id: str, **fields) -> Optional[User]:
        user = self.get_user(user_id)
        if not user:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        try:
            self.save()
        except IntegrityError as err:
            if _is_unique_violation(err):
                raise conflict("Email already registered")
            raise internal("Could not update user")
        return user

    def upgrade_user(self, user_id: str) -> bool:
        """
        Flip the premium flag in one conditional UPDATE.
        Returns True when this call changed the row.
        """
        changed = (
            self.__session.query(User)
            .filter(User.id == user_id, User.is_chirpy_red.is_(False))
            .update({User.is_chirpy_red: True, User.updated_at: utcnow()}, synchronize_session="fetch")
        )
        self.save()
        return changed > 0

    def delete_all_users(self) -> int:
        """Hard delete every user; chirps and refresh tokens go with them (FK cascade)."""
        deleted = self.__session.query(User).delete(synchronize_session=False)
        self.save()
        # cascaded rows may still sit in the identity map
        self.__session.expunge_all()
        return deleted

    # --- refresh tokens ---

    def create_refresh_token(self, token: str, user_id: str, expires_at: datetime) -> RefreshToken:
        rt = RefreshToken(token=token, user_id=user_id, expires_at=expires_at, revoked_at=None)
        self.new(rt)
        try:
            self.save()
        except IntegrityError:
            # unknown owner (FK) or token collision; surfaced, not retried
            raise internal("Could not persist refresh token")
        return rt

    def find_refresh_token(self, token: str) -> Optional[RefreshToken]:
        return self.get(RefreshToken, token)

    def revoke_refresh_token(self, token: str) -> bool:
        """
        Stamp revoked_at on an active token. Unknown or already revoked tokens are left alone.
        """
        now = utcnow()
        changed = (
            self.__session.query(RefreshToken)
            .filter(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: now, RefreshToken.updated_at: now}, synchronize_session="fetch")
        )
        self.save()
        return changed > 0

    def revoke_user_refresh_tokens(self, user_id: str) -> int:
        now = utcnow()
        changed = (
            self.__session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: now, RefreshToken.updated_at: now}, synchronize_session="fetch")
        )
        self.save()
        return changed

    # --- chirps ---

    def create_chirp(self, body: str, user_id: str) -> Chirp:
        chirp = Chirp(body=body, user_id=user_id)
        self.new(chirp)
        try:
            self.save()
        except IntegrityError:
            raise internal("Could not create chirp")
        return chirp

    def get_chirp(self, chirp_id: str) -> Optional[Chirp]:
        return self.get(Chirp, chirp_id)

    def list_chirps(self, author_id: Optional[str] = None, sort: str = "asc") -> List[Chirp]:
        if sort not in SORT_ORDERS:
            raise bad_request(f"Unsupported sort order: {sort}. Allowed: asc, desc")
        query = self.__session.query(Chirp)
        if author_id:
            query = query.filter(Chirp.user_id == author_id)
        order = Chirp.created_at.desc() if sort == "desc" else Chirp.created_at.asc()
        return query.order_by(order, Chirp.id).all()

    def delete_chirp(self, chirp_id: str, owner_id: str) -> bool:
        """Delete only when the chirp belongs to owner_id."""
        deleted = (
            self.__session.query(Chirp)
            .filter(Chirp.id == chirp_id, Chirp.user_id == owner_id)
            .delete(synchronize_session="fetch")
        )
        self.save()
        return deleted > 0
