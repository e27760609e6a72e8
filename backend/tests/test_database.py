import os
import sys

from sqlalchemy import inspect

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import Settings
from app.database import _build_connect_args, create_db_engine, init_db


def test_sqlite_connect_args_allow_cross_thread_use():
    settings = Settings(database_url="sqlite:///./data/points.db")

    assert _build_connect_args(settings) == {"check_same_thread": False}


def test_render_postgres_requires_ssl():
    settings = Settings(database_url="postgresql://user:pw@dpg-abc.frankfurt-postgres.render.com/points")

    assert _build_connect_args(settings) == {"sslmode": "require"}


def test_local_postgres_has_no_extra_connect_args():
    settings = Settings(database_url="postgresql://user:pw@localhost/points")

    assert _build_connect_args(settings) == {}


def test_init_db_creates_users_table_idempotently(tmp_path):
    database_path = tmp_path / "nested" / "points.db"
    engine = create_db_engine(Settings(database_url=f"sqlite:///{database_path}"))

    init_db(engine)
    init_db(engine)

    assert database_path.parent.is_dir()
    columns = {column["name"] for column in inspect(engine).get_columns("users")}
    assert columns == {"id", "email", "username", "password", "points", "created_at"}
    engine.dispose()
