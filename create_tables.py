# create_tables.py
import argparse

from taskhub.database import Base, DATABASE_URL, engine
from taskhub.models.user import User  # noqa: F401
from taskhub.models.task import Task  # noqa: F401


def create_tables(drop: bool = False):
    """Create all tables, optionally dropping existing ones first"""
    if drop:
        Base.metadata.drop_all(bind=engine)
        print("Existing tables dropped")

    Base.metadata.create_all(bind=engine)
    print(f"All tables created on {engine.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the TaskHub schema")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    print(f"Using database: {DATABASE_URL.split('@')[-1]}")
    create_tables(drop=args.drop)
