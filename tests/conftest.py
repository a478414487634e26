import pytest
from fastapi.testclient import TestClient

from database import Base, Settings, create_session_factory
from main import create_app
from core.room_manager import RoomManager
import models  # noqa: F401  (register tables on Base.metadata)


PLAYER_NAMES = ["Alice", "Bob", "Carol", "Dave"]


@pytest.fixture()
def settings(tmp_path):
    # File-backed SQLite so that concurrent tests can open one connection per thread
    return Settings(database_url=f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture()
def session_factory(settings):
    factory = create_session_factory(settings.database_url)
    engine = factory.kw["bind"]
    Base.metadata.create_all(bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def full_room(db):
    """A WAITING room with Alice, Bob, Carol and Dave; returns (room_id, {name: player_id})."""
    room, host = RoomManager.create_room(db, PLAYER_NAMES[0])
    room_id = room.room_id
    ids = {PLAYER_NAMES[0]: host.id}
    for name in PLAYER_NAMES[1:]:
        ids[name] = RoomManager.join_room(db, room_id, name).id
    return room_id, ids


@pytest.fixture()
def client(settings):
    application = create_app(settings)
    with TestClient(application) as test_client:
        yield test_client
