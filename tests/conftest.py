"""Shared pytest fixtures and test utilities for encodable tests."""

import os
import tempfile
from typing import Any, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from encodable.config import Settings
from encodable.encoder import Encoder
from tests.models import Account, Authorization, Base, Person, Widget


@pytest.fixture(scope="function")
def temp_db() -> Generator[Engine, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Engine with tables created
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(engine)
    engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db) -> Generator[Session, None, None]:
    """Get a database session from temp_db."""
    with Session(temp_db, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def encoder(settings) -> Generator[Encoder, None, None]:
    """Create an isolated encoder with the test models registered."""
    encoder = Encoder(settings=settings)
    for model in (Person, Authorization, Widget, Account):
        encoder.register(model)

    yield encoder

    encoder.reset()


@pytest.fixture
def person(db_session) -> Person:
    """Create a person with two authorizations."""
    person = Person(
        login="flipsasser",
        first_name="flip",
        last_name="sasser",
        email="flip@foobar.com",
        encrypted_password="0" * 60,
        developer=True,
        admin=True,
        notifications=7,
    )
    person.authorizations.append(Authorization(name="create_blog_posts"))
    person.authorizations.append(Authorization(name="edit_blog_posts"))
    db_session.add(person)
    db_session.commit()
    return person


def attributes(encoder: Encoder, instance: Any, *names: str) -> dict[str, Any]:
    """
    Get the encoded native attributes of an instance.

    Args:
        encoder: Encoder whose serializer encodes the values
        instance: Model instance
        *names: Names to keep. If empty, keeps every native field.

    Returns:
        Dictionary of field name to encoded value
    """
    fields = encoder.adapter.native_field_names(type(instance))
    return {
        name: encoder.serializer.encode_value(getattr(instance, name))
        for name in fields
        if not names or name in names
    }


def attributes_except(encoder: Encoder, instance: Any, *names: str) -> dict[str, Any]:
    """Get the encoded native attributes of an instance, minus some names."""
    return {
        name: value
        for name, value in attributes(encoder, instance).items()
        if name not in names
    }
