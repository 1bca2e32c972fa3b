# listing_scout/crawler/__init__.py
"""Network side of ListingScout: the document fetcher and record models."""
