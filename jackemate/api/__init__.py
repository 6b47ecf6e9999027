# jackemate/api/__init__.py
# This file makes the api directory a Python package.

from . import admin
from . import auth
from . import catalog
from . import comments
from . import reports
from . import stats
from . import users
from . import votes

__all__ = [
    "auth",
    "users",
    "reports",
    "comments",
    "votes",
    "admin",
    "catalog",
    "stats",
]
