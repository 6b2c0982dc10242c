import os

# Settings are read at import time; keep the test run in memory and off disk.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from mallaplan.core.database import build_engine, get_db  # noqa: E402
from mallaplan.engine.catalog import Catalog, Course  # noqa: E402
from mallaplan.models.base import Base  # noqa: E402
from mallaplan.services.cache import CatalogCache  # noqa: E402
import mallaplan.models  # noqa: E402,F401


@pytest.fixture
def catalog():
    return Catalog.from_courses("ICCI", [
        Course("MAT001", "Calculo I", 3),
        Course("PRG001", "Programacion I", 4),
        Course("PRG002", "Programacion II", 4, frozenset({"PRG001"})),
    ])


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache():
    return CatalogCache()


@pytest.fixture
def client(db_engine):
    from mallaplan.main import app

    testing_session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.catalog_cache = CatalogCache()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
