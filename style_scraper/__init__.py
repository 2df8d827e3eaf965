"""Style Token Scraper: fetch escalation and design token extraction."""
__version__ = "1.0.0"
