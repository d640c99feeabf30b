from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from storefront.config import settings

Base = declarative_base()


def _install_sqlite_hooks(engine: Engine) -> None:
    """
    pysqlite defers BEGIN until the first DML statement, which breaks SAVEPOINT.
    Take over transaction control so nested scopes behave like on Postgres.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> Engine:
    engine = create_engine(url, future=True, echo=False, **kwargs)
    if engine.dialect.name == "sqlite":
        _install_sqlite_hooks(engine)
    return engine


DATABASE_URL = settings.DATABASE_URL
engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = None, reset: bool = False):
    """
    Create the schema. Model modules are imported here so the metadata is
    populated before create_all runs.
    """
    import storefront.models  # noqa: F401

    bind = bind or engine
    if reset:
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
