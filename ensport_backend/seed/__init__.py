# __init__.py
# Imports all seed functions for easy batch seeding.

from .seed_sports import seed_sports
from .seed_admin import seed_admin
