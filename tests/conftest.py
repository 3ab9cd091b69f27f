"""Pytest configuration helpers."""

import os
from contextlib import contextmanager
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

os.environ.pop("DATABASE_URL", None)
os.environ["DISABLE_AUDIO_UPLOAD_HISTORY"] = "true"

from zhaiyao.app import create_app  # noqa: E402
from zhaiyao.repositories import UploadRepository, init_db  # noqa: E402


@pytest.fixture
def repository() -> UploadRepository:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)

    @contextmanager
    def session_factory():
        with Session(engine) as session:
            yield session

    return UploadRepository(session_factory)


@pytest.fixture
def app():
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
