"""HouseFinder Scrapers Package"""

from .base import BaseScraper
from .duproprio import DuProprioScraper
from .centris import CentrisScraper
from .sutton import SuttonScraper

__all__ = ["BaseScraper", "DuProprioScraper", "CentrisScraper", "SuttonScraper"]
