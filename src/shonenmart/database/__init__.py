from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool, QueuePool


class Database:
    """Engine plus session factory for one database.

    A single instance is built at startup and stored on `app.state.database`;
    request handlers get sessions from it through `get_db`.
    """

    def __init__(self, url: str, transaction_timeout_ms: int = 5000):
        self.url = url
        self.transaction_timeout_ms = transaction_timeout_ms
        self.engine = _build_engine(url, transaction_timeout_ms)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def create_all(self):
        from ..models import Base

        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def _build_engine(url: str, timeout_ms: int):
    if url.startswith("sqlite"):
        in_memory = ":memory:" in url or url == "sqlite://"
        # In-memory databases must share one connection across threads
        kwargs = {"poolclass": StaticPool} if in_memory else {}
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            echo=False,
            **kwargs,
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA temp_store=MEMORY")
            # Lock waits count against the transaction deadline
            cursor.execute(f"PRAGMA busy_timeout={int(timeout_ms)}")
            cursor.close()

        return engine

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={int(timeout_ms)} -c lock_timeout={int(timeout_ms)}"
    return create_engine(
        url,
        connect_args=connect_args,
        poolclass=QueuePool,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def get_db(request: Request):
    """Dependency yielding a request-scoped session from the app's Database."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
