from sqlalchemy import func, select

from bloglist import seed, services
from bloglist.auth import verify_password
from bloglist.database import make_engine, make_session_factory
from bloglist.models import Blog, User


def test_seed_database_replaces_existing_data(session, settings):
    services.create_user(session, "leftover", "Left Over", "secret123", settings)

    counts = seed.seed_database(session, hash_rounds=4)

    assert counts == {"users": 3, "blogs": 3}
    usernames = {u.username for u in services.list_users(session)}
    assert usernames == {"johndoe", "janedoe", "admin"}
    assert session.scalar(select(func.count()).select_from(Blog)) == 3


def test_seeded_blogs_are_owned(session):
    seed.seed_database(session, hash_rounds=4)

    john = services.find_user_by_username(session, "johndoe")
    assert sorted(b.title for b in john.blogs) == ["Another Blog by John", "First Blog"]
    assert verify_password("password123", john.password_hash)


def test_seed_is_repeatable(session):
    seed.seed_database(session, hash_rounds=4)
    seed.seed_database(session, hash_rounds=4)
    assert session.scalar(select(func.count()).select_from(User)) == 3


def test_seed_main(tmp_path, monkeypatch):
    db_path = tmp_path / "seed.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")

    seed.main()

    engine = make_engine(f"sqlite:///{db_path}")
    session = make_session_factory(engine)()
    try:
        assert session.scalar(select(func.count()).select_from(Blog)) == 3
    finally:
        session.close()
        engine.dispose()


def test_seeded_data_through_api(client, app):
    session = app.state.session_factory()
    try:
        seed.seed_database(session, hash_rounds=4)
    finally:
        session.close()

    resp = client.post("/api/login", json={"username": "janedoe", "password": "password456"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Jane Doe"

    blogs = client.get("/api/blogs").json()
    assert {b["title"] for b in blogs} == {"First Blog", "Second Blog", "Another Blog by John"}
