from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Base class for declarative ORM models.
Base = declarative_base()


def build_session_factory(database_url: str):
    """Create the SQLAlchemy engine and a configured "Session" class bound to it."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # FastAPI may serve a request on a different thread than the one that opened the connection.
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, connect_args=connect_args)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(session_factory):
    """Create database tables if they don't exist."""
    Base.metadata.create_all(bind=session_factory.kw["bind"])


def get_db(request: Request):
    """FastAPI dependency to get a DB session for a single request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        # Ensure the session is always closed after the request is finished.
        db.close()
