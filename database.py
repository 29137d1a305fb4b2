from sqlalchemy import create_engine, Column, String, Text
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()

# --- Models ---

class StoredValue(Base):
    """One key of the key-value blob store (the SQL stand-in for localStorage)."""
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)

# --- Engine / Sessions ---
def make_engine(url: str):
    # SQLite connections are shared across Streamlit's script threads
    return create_engine(url, connect_args={"check_same_thread": False} if url.startswith("sqlite") else {})

def make_session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)

def init_db(engine):
    Base.metadata.create_all(bind=engine)
