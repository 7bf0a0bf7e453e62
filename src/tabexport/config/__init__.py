"""Configuration package exposing the shared `settings` instance."""

from .settings import Settings as Settings
from .settings import settings as settings
