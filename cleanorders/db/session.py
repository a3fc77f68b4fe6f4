"""Database session management."""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from .models import Base

class SessionManager:
    """Manages database sessions."""
    
    def __init__(self, database_url: str):
        """Initialize session manager with database URL."""
        self.database_url = database_url
        self.engine = create_engine(database_url)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )
        self.logger = logging.getLogger(__name__)
        
    def create_tables(self) -> None:
        """Create the storage tables if they do not exist."""
        Base.metadata.create_all(self.engine)
        self.logger.debug(f"Ensured tables exist for {self.engine.url}")
        
    def get_session(self) -> Session:
        """Get a new database session."""
        session = self.SessionLocal()
        self.logger.debug(f"Created new session: {id(session)}")
        return session
        
    def __enter__(self) -> Session:
        """Context manager entry."""
        self.session = self.get_session()
        self.logger.debug(f"Entering context with session: {id(self.session)}")
        return self.session
        
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.logger.debug(f"Exiting context with session: {id(self.session)}")
        try:
            if exc_type is None:
                self.logger.debug("Committing session")
                self.session.commit()
            else:
                self.logger.debug("Rolling back session")
                self.session.rollback()
        finally:
            self.logger.debug("Closing session")
            self.session.close()
            
    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
