"""
django-devnovate - A moderated community blog for Django.

Features:
- Admin-moderated publish workflow (draft, pending, published, rejected, hidden)
- Re-review of published posts whenever their content changes
- Likes, comments and comment replies on published posts
- Latest, popular and trending listings with search and category filters
- Email notifications for approvals and rejections
- Admin dashboard, analytics and user management
"""

__version__ = "0.1.0"
