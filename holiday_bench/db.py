from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from holiday_bench.config import config
from holiday_bench.exceptions import DatabaseError
from holiday_bench.logging_setup import get_logger

logger = get_logger('db')

class Database:
    """Database connection manager for the store holiday benchmark."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Database, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the database connection if not already initialized."""
        if self._initialized:
            return
        
        self._engine = None
        self._session_factory = None
        self._initialized = True
    
    def initialize(self, connection_string=None):
        """Initialize database connection.
        
        Any previously opened engine is disposed first, so calling this again
        switches the process to another database.
        
        Args:
            connection_string: Optional database URL (string or sqlalchemy URL).
                              If not provided, will use configuration.
        
        Raises:
            ConfigError: If the configured connection settings are incomplete
            DatabaseError: If the database cannot be reached
        """
        if connection_string is None:
            connection_string = config.get_db_url()
        
        url = make_url(connection_string)
        echo = config.get_boolean('DATABASE', 'echo', False)
        
        self.dispose()
        
        try:
            if url.get_backend_name() == 'sqlite':
                self._engine = create_engine(url, echo=echo)
                event.listen(self._engine, 'connect', _enable_sqlite_foreign_keys)
            else:
                self._engine = create_engine(
                    url,
                    echo=echo,
                    pool_pre_ping=True,
                    pool_recycle=1800
                )
            
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self.dispose()
            raise DatabaseError(
                f"Failed to connect to {url.render_as_string(hide_password=True)}: {str(e)}"
            ) from e
        
        self._session_factory = sessionmaker(bind=self._engine)
        logger.info(f"Connected to {url.render_as_string(hide_password=True)}")
    
    def dispose(self):
        """Close all pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
    
    @property
    def engine(self):
        """Get the database engine."""
        if self._engine is None:
            self.initialize()
        return self._engine
    
    def get_session(self):
        """Get a new database session."""
        if self._session_factory is None:
            self.initialize()
        return self._session_factory()
    
    @contextmanager
    def session_scope(self):
        """Provide a transactional scope around a series of operations."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

# Global database instance
db = Database()

def get_session():
    """Get a new database session."""
    return db.get_session()

@contextmanager
def session_scope():
    """Session scope context manager."""
    with db.session_scope() as session:
        yield session
