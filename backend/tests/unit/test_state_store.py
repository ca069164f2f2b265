import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from protrack.database import Base
from protrack.repositories.state_store import (
    ACTIVE_VIEW_KEY,
    SNAPSHOT_KEY,
    USER_KEY,
    InMemoryStateStore,
    SqlStateStore,
)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(params=["memory", "sql"])
def store_factory(request, session_factory):
    shared = {}
    if request.param == "memory":
        return lambda namespace: InMemoryStateStore(namespace, data=shared)
    return lambda namespace: SqlStateStore(session_factory, namespace=namespace)


def test_load_returns_default_for_missing_key(store_factory):
    store = store_factory("s1")

    assert store.load(USER_KEY) is None
    assert store.load(ACTIVE_VIEW_KEY, "dashboard") == "dashboard"


def test_save_and_overwrite(store_factory):
    store = store_factory("s1")

    store.save(USER_KEY, {"username": "admin", "page_access": ["all"]})
    store.save(USER_KEY, {"username": "op", "page_access": ["Dashboard"]})

    assert store.load(USER_KEY) == {"username": "op", "page_access": ["Dashboard"]}


def test_namespaces_are_isolated(store_factory):
    first = store_factory("s1")
    second = store_factory("s2")

    first.save(ACTIVE_VIEW_KEY, "step3")

    assert second.load(ACTIVE_VIEW_KEY) is None


def test_clear_one_key_or_whole_namespace(store_factory):
    store = store_factory("s1")
    other = store_factory("s2")
    store.save(USER_KEY, {"username": "admin"})
    store.save(SNAPSHOT_KEY, {"productions": []})
    other.save(USER_KEY, {"username": "op"})

    store.clear(USER_KEY)
    assert store.load(USER_KEY) is None
    assert store.load(SNAPSHOT_KEY) == {"productions": []}

    store.clear()
    assert store.load(SNAPSHOT_KEY) is None
    assert other.load(USER_KEY) == {"username": "op"}
