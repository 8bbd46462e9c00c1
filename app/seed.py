"""
Seed the database with demo users, restaurants, reviews and votes.

Usage:
    python -m app.seed            # drop and recreate every table, then seed
    python -m app.seed --keep     # seed on top of the existing schema

Everything goes through the service layer so seeded data obeys the same rules
(unique usernames, one vote per user and review) as data created over HTTP.
"""

import argparse
import logging

from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.logging_config import setup_logging
from app.models.registry import Base
from app.modules.restaurants.schemas import RestaurantCreate
from app.modules.reviews.schemas import ReviewCreate
from app.modules.users.schemas import UserCreate
from app.services.restaurants.service import RestaurantService
from app.services.reviews.service import ReviewService
from app.services.users.service import UserService
from app.services.votes.vote_service import VoteService

logger = logging.getLogger("app.seed")

DEFAULT_PASSWORD = "password123"

USERS = [
    ("mario_rossi", "mario@example.com"),
    ("giulia_bianchi", "giulia@example.com"),
    ("luca_verdi", "luca@example.com"),
    ("reviewer1", "rev1@example.com"),
    ("reviewer2", "rev2@example.com"),
    ("reviewer3", "rev3@example.com"),
]

# (creator index, name, description, latitude, longitude)
RESTAURANTS = [
    (0, "Trattoria Single-Threaded", "One dish at a time, strictly in order.", 41.9028, 12.4964),
    (0, "Pizzeria Callback Hell", "Every pizza calls another pizza.", 45.4642, 9.1900),
    (1, "Ristorante 404 Not Found", "The place exists. The food does not.", 40.8518, 14.2681),
    (1, "Osteria NullPointerException", "Cosy, until service crashes without warning.", 43.7696, 11.2558),
    (2, "Sushi Bar Async/Await", "Sushi arrives when it resolves.", 45.0703, 7.6869),
    (2, "Ristorante Race Condition", "Two waiters serve the same table at once.", 43.3188, 11.3307),
]

# (author index, restaurant index, rating, content)
REVIEWS = [
    (3, 0, 3, "Ordered starters, got them three hours later. Still warm, though."),
    (4, 0, 4, "The waiter is still processing my request. Worth the wait."),
    (5, 1, 2, "Each finished plate spawned another I never ordered."),
    (3, 1, 1, "Asked for a Margherita, received a Promise. It resolved into Carbonara."),
    (4, 2, 2, "Came for dinner, got a very polished error page."),
    (5, 3, 3, "Lovely atmosphere. Dessert dereferenced nothing."),
    (3, 4, 5, "Best nigiri I have ever awaited."),
    (4, 5, 4, "My order was served twice. Delicious both times."),
]

# (voter index, review index, vote type)
VOTES = [
    (0, 0, "upvote"),
    (1, 0, "upvote"),
    (5, 0, "downvote"),
    (0, 1, "upvote"),
    (1, 2, "downvote"),
    (2, 3, "upvote"),
    (4, 3, "upvote"),
    (5, 6, "upvote"),
    (0, 6, "upvote"),
    (3, 7, "downvote"),
]


def seed(*, reset: bool = True, password: str = DEFAULT_PASSWORD) -> dict:
    """Populate the database and return how many rows of each kind were created."""
    if reset:
        logger.warning("Dropping and recreating all tables on %s", engine.url)
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        user_service = UserService(db)
        users = [
            user_service.create_user(
                UserCreate(username=username, email=email, password=password)
            )
            for username, email in USERS
        ]

        restaurant_service = RestaurantService(db)
        restaurants = [
            restaurant_service.create_restaurant(
                payload=RestaurantCreate(
                    name=name,
                    description=description,
                    latitude=latitude,
                    longitude=longitude,
                ),
                current_user=users[creator],
            )
            for creator, name, description, latitude, longitude in RESTAURANTS
        ]

        review_service = ReviewService(db)
        reviews = [
            review_service.create_review(
                payload=ReviewCreate(
                    restaurant_id=restaurants[restaurant].id,
                    content=content,
                    rating=rating,
                ),
                current_user=users[author],
            )
            for author, restaurant, rating, content in REVIEWS
        ]

        vote_service = VoteService(db)
        for voter, review, vote_type in VOTES:
            vote_service.submit_vote(
                review_id=reviews[review].id,
                current_user=users[voter],
                vote_type=vote_type,
            )
    finally:
        db.close()

    counts = {
        "users": len(USERS),
        "restaurants": len(RESTAURANTS),
        "reviews": len(REVIEWS),
        "votes": len(VOTES),
    }
    logger.info("Seeding complete: %s", counts)
    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed the review platform database.")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Do not drop existing tables before seeding.",
    )
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    args = parser.parse_args()

    setup_logging(log_level=settings.log_level, use_colors=True)
    seed(reset=not args.keep, password=args.password)


if __name__ == "__main__":
    main()
