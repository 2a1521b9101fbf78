"""Database connection utilities and ORM models for the ComradeZone dating service."""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship, sessionmaker

from comradezone.utils.errors import ConfigurationError, ConflictError, DatabaseError
from comradezone.utils.logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    """Get current UTC time (naive) to replace datetime.utcnow()."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Generate a new string primary key."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class ProfileDB(Base):
    """Dating profile database model."""

    __tablename__ = "dating_profiles"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    account_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(100))
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    age: Mapped[int] = mapped_column(Integer, index=True)
    gender: Mapped[str] = mapped_column(String(20), index=True)
    min_age: Mapped[int] = mapped_column(Integer, default=18)
    max_age: Mapped[int] = mapped_column(Integer, default=30)
    show_me: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    completeness: Mapped[int] = mapped_column(Integer, default=0)
    interests: Mapped[List[str]] = mapped_column(JSON, default=list)
    course: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    year_of_study: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    faculty: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    relationship_goal: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    instagram_handle: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    prompts: Mapped[List[Dict[str, str]]] = mapped_column(JSON, default=list)
    super_likes_remaining: Mapped[int] = mapped_column(Integer, default=3)
    last_super_like_reset: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    seeking: Mapped[List["SeekingGenderDB"]] = relationship(
        back_populates="profile", cascade="all, delete-orphan", lazy="selectin"
    )
    photos: Mapped[List["PhotoDB"]] = relationship(
        back_populates="profile", cascade="all, delete-orphan", lazy="selectin", order_by="PhotoDB.sort_order"
    )

    @property
    def seeking_genders(self) -> List[str]:
        """Genders this profile wants to be shown."""
        return sorted(s.gender for s in self.seeking)


class SeekingGenderDB(Base):
    """One gender a profile is looking for."""

    __tablename__ = "dating_seeking_genders"

    profile_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), primary_key=True)
    gender: Mapped[str] = mapped_column(String(20), primary_key=True)

    profile: Mapped[ProfileDB] = relationship(back_populates="seeking")


class PhotoDB(Base):
    """Profile photo database model (URL only, storage lives elsewhere)."""

    __tablename__ = "dating_photos"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    profile_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    url: Mapped[str] = mapped_column(String(500))
    is_main: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    profile: Mapped[ProfileDB] = relationship(back_populates="photos")


class SwipeDB(Base):
    """Directional swipe, one row per ordered (actor, target) pair."""

    __tablename__ = "dating_swipes"
    __table_args__ = (UniqueConstraint("actor_id", "target_id", name="uq_dating_swipe_pair"),)

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    actor_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    target_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    type: Mapped[str] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class MatchDB(Base):
    """Match database model. The pair is stored with the smaller profile id first."""

    __tablename__ = "dating_matches"
    __table_args__ = (
        UniqueConstraint("profile1_id", "profile2_id", name="uq_dating_match_pair"),
        CheckConstraint("profile1_id < profile2_id", name="ck_dating_match_ordered"),
    )

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    profile1_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    profile2_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    matched_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    last_message_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class BlockDB(Base):
    """Directional block record."""

    __tablename__ = "dating_blocks"
    __table_args__ = (UniqueConstraint("blocker_id", "blocked_id", name="uq_dating_block_pair"),)

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    blocker_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    blocked_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class MessageDB(Base):
    """Message sent inside a match thread."""

    __tablename__ = "dating_messages"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    match_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_matches.id"), index=True)
    sender_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"))
    content: Mapped[str] = mapped_column(Text)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)


class ReportDB(Base):
    """Profile report database model."""

    __tablename__ = "dating_reports"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    reporter_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    reported_id: Mapped[str] = mapped_column(String(50), ForeignKey("dating_profiles.id"), index=True)
    reason: Mapped[str] = mapped_column(String(50))
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Database:
    """Singleton database connection manager."""

    _engine = None
    _session_factory = None
    _url: Optional[str] = None

    @classmethod
    def configure(cls, database_url: Optional[str]) -> None:
        """Point the manager at a different database, dropping any existing engine.

        Passing None falls back to `DATABASE_URL` from the settings.
        """
        cls.dispose()
        cls._url = database_url

    @classmethod
    def dispose(cls) -> None:
        """Dispose of the engine and forget the session factory."""
        if cls._engine is not None:
            cls._engine.dispose()
        cls._engine = None
        cls._session_factory = None

    @classmethod
    def get_engine(cls) -> Any:
        """Get or create the database engine."""
        if cls._engine is None:
            from comradezone.config import get_settings

            settings = get_settings()
            database_url = cls._url or settings.DATABASE_URL

            if not database_url:
                raise ConfigurationError("DATABASE_URL is not configured")

            # SQLAlchemy 1.4+ requires postgresql:// instead of postgres://
            if database_url.startswith("postgres://"):
                database_url = database_url.replace("postgres://", "postgresql://", 1)

            engine_kwargs: Dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DEBUG}
            if database_url.startswith("sqlite"):
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            else:
                engine_kwargs["pool_recycle"] = 300

            try:
                cls._engine = create_engine(database_url, **engine_kwargs)
                logger.info("Database engine created", dialect=cls._engine.dialect.name)
            except Exception as e:
                safe_url = database_url
                if "@" in safe_url:
                    try:
                        part1, part2 = safe_url.rsplit("@", 1)
                        if ":" in part1:
                            scheme_user, _ = part1.rsplit(":", 1)
                            safe_url = f"{scheme_user}:***@{part2}"
                    except ValueError:
                        safe_url = "REDACTED_MALFORMED_URL"

                logger.error("Failed to create database engine", error=str(e), url=safe_url)
                raise DatabaseError("Failed to connect to database", details={"error": str(e), "url": safe_url}) from e
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> Any:
        """Get or create the session factory."""
        if cls._session_factory is None:
            cls._session_factory = sessionmaker(bind=cls.get_engine(), expire_on_commit=False)
        return cls._session_factory

    @classmethod
    def get_session(cls) -> Session:
        """Get a new database session."""
        return cls.get_session_factory()()  # type: ignore

    @classmethod
    def create_tables(cls) -> None:
        """Create all database tables."""
        engine = cls.get_engine()
        Base.metadata.create_all(engine)
        logger.info("Database tables created")


def get_session() -> Session:
    """Get a database session."""
    return Database.get_session()


def init_database() -> None:
    """Initialize the database and create tables."""
    Database.create_tables()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Commits on success and rolls back on any error. Unique-constraint
    violations surface as ConflictError, other store failures as
    DatabaseError; application errors propagate unchanged.
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.warning("Integrity constraint violated", error=str(e.orig))
        raise ConflictError("Conflicting write, please try again", details={"error": str(e.orig)}) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Database transaction failed", error=str(e))
        raise DatabaseError("Database operation failed", details={"error": str(e)}) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def insert_for(session: Session, model: Any) -> Any:
    """Build a dialect-specific INSERT that supports ON CONFLICT clauses.

    Args:
        session: Active session, used to find the bound dialect.
        model: ORM model class to insert into.

    Returns:
        A PostgreSQL or SQLite `Insert` construct.

    Raises:
        ConfigurationError: If the database dialect has no upsert support.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise ConfigurationError(f"Unsupported database dialect: {dialect}", details={"dialect": dialect})
