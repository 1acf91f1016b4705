# storefront/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from storefront.utils.settings import DATABASE_URL


class Base(DeclarativeBase):
    pass


def _sqlite_foreign_keys_on(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    #sqlite ignores ON DELETE CASCADE unless the pragma is set on every connection
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_foreign_keys_on)
    return engine


connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = enable_sqlite_foreign_keys(
    create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
)
SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    #all models must be imported before create_all
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
