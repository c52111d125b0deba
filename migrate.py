from forum.db.session import engine, Base
from forum.models.user import User  # Import User model here
from forum.models.category import Category  # Import Category model here
from forum.models.post import Post  # Import Post model here
from forum.models.comment import Comment  # Import Comment model here
from forum.models.vote import PostVote, PostLike  # Import vote and like facts here


def run_migrations():
    print("Running database migrations...")
    Base.metadata.create_all(bind=engine)
    print("Migrations completed successfully.")


if __name__ == "__main__":
    run_migrations()
