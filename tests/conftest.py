"""pytest configuration and fixtures."""

import itertools
import os

# Settings are read at import time, so the test environment must be set first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from comradezone.models.profile import Gender, ProfileInput  # noqa: E402
from comradezone.services.profile_service import upsert_profile  # noqa: E402
from comradezone.utils.database import Database, get_session, init_database  # noqa: E402

ALL_GENDERS = [Gender.MALE, Gender.FEMALE, Gender.NON_BINARY]


@pytest.fixture(autouse=True)
def database(tmp_path):
    """Give every test its own SQLite database file."""
    Database.configure(f"sqlite:///{tmp_path / 'dating.db'}")
    init_database()
    yield Database
    Database.configure(None)


@pytest.fixture
def db_session():
    """A raw session for inspecting rows written by the services."""
    session = get_session()
    yield session
    session.close()


@pytest.fixture
def make_profile():
    """Factory creating profiles through the profile service.

    Defaults produce a 21 year old woman open to every gender aged 18-30,
    so any two default profiles are mutual candidates.
    """
    counter = itertools.count(1)

    def _make(account_id=None, **overrides):
        n = next(counter)
        data = {
            "display_name": f"Comrade {n}",
            "age": 21,
            "gender": Gender.FEMALE,
            "seeking_genders": ALL_GENDERS,
            "min_age": 18,
            "max_age": 30,
        }
        data.update(overrides)
        return upsert_profile(account_id or f"account-{n}", ProfileInput(**data))

    return _make
