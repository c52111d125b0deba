from forum.db.session import engine, Base, SessionLocal
from forum.services.categories import seed_categories
import forum.models  # Import all models here


def initialize_database():
    print("Initializing the forum database...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_categories(db)
    finally:
        db.close()
    print(f"Database initialization completed successfully ({added} categories seeded).")


if __name__ == "__main__":
    initialize_database()
