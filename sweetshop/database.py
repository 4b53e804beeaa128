# sweetshop/database.py
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from sweetshop.core.config import Settings, get_settings

settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    - postgresql : append sslmode=require if it is not already present
    - sqlite     : allow the connection to be used from FastAPI's
                   threadpool (check_same_thread=False)
    """
    connect_args: dict = {}

    if database_url.startswith("postgresql") and "sslmode=" not in database_url:
        if "?" in database_url:
            database_url = database_url + "&sslmode=require"
        else:
            database_url = database_url + "?sslmode=require"

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        database_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def engine_from_settings(cfg: Settings) -> Engine:
    return build_engine(cfg.DATABASE_URL)


engine = engine_from_settings(settings)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
