# exmobile/store.py
from pymongo import ASCENDING


class MarketStore:
    """
    Data-access object over the marketplace database.

    Built once by create_app() and handed to every blueprint factory, so
    handlers never reach for a module-level client.
    """

    def __init__(self, db):
        self.db = db
        self.categories = db.categories
        self.products = db.products
        self.users = db.users
        self.bookings = db.bookings
        self.blogs = db.blogs
        self.faqs = db.faqs

    def ensure_indexes(self):
        # User creation relies on this index to stay race-free
        self.users.create_index([("email", ASCENDING)], unique=True)

    def find_user(self, email):
        if not email:
            return None
        return self.users.find_one({"email": email})

    def counts(self):
        return {
            "users": self.users.estimated_document_count(),
            "products": self.products.estimated_document_count(),
            "bookings": self.bookings.estimated_document_count(),
        }
