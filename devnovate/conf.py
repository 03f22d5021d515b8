"""
Configuration settings for django-devnovate.

Override these in your Django settings.py:

    DEVNOVATE = {
        'POSTS_PER_PAGE': 10,
        'NOTIFY_AUTHORS': True,
        'SITE_NAME': 'Devnovate Blog Platform',
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Listing
    "POSTS_PER_PAGE": 10,
    "MAX_PAGE_SIZE": 50,
    "TRENDING_LIMIT": 10,

    # Posts
    "CATEGORY_CHOICES": [
        ("Technology", "Technology"),
        ("Business", "Business"),
        ("Lifestyle", "Lifestyle"),
        ("Health", "Health"),
        ("Education", "Education"),
        ("Entertainment", "Entertainment"),
        ("Sports", "Sports"),
        ("Politics", "Politics"),
        ("Science", "Science"),
        ("Other", "Other"),
    ],
    "WORDS_PER_MINUTE": 200,
    "MAX_TAGS": 10,
    "TAG_MAX_LENGTH": 20,
    "SLUG_MAX_LENGTH": 255,

    # Moderation
    "REJECTION_REASON_MIN_LENGTH": 10,
    "REJECTION_REASON_MAX_LENGTH": 500,

    # Engagement score weights
    "ENGAGEMENT_WEIGHTS": {
        "likes": 2,
        "comments": 3,
        "views": 0.1,
        "shares": 5,
    },

    # Notifications
    "NOTIFY_AUTHORS": True,
    "SITE_NAME": "Devnovate Blog Platform",
    "SITE_URL": "http://localhost:3000",
    "FROM_EMAIL": None,  # falls back to DEFAULT_FROM_EMAIL
}


class DevnovateSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from devnovate.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid devnovate setting: {name}")

        user_settings = getattr(settings, "DEVNOVATE", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def CATEGORIES(self):
        """Return the category values without their labels."""
        return [value for value, label in self.CATEGORY_CHOICES]


blog_settings = DevnovateSettings()
