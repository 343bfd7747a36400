"""Internal constants shared across the library."""

BASE_URL = "https://jsonplaceholder.typicode.com"
COLLECTION_PATH = "/posts"
USER_AGENT = "quotesync/1 (+aiohttp)"

#: Key under which the collection is stored in the key-value backend.
STORAGE_KEY = "quotes"

#: Prefix used to derive a category for remote records, which carry a
#: ``userId`` instead of a category.
SERVER_CATEGORY_PREFIX = "ServerCategory-"

#: Category listing keyword meaning "no filter".
ALL_CATEGORIES = "all"

# Built-in collection used when nothing (or garbage) has been persisted.
SEED_QUOTES: tuple[dict[str, str], ...] = (
    {"text": "Love is patient.", "category": "love"},
    {"text": "Be happy", "category": "happiness"},
    {"text": "Food is life.", "category": "food"},
)
