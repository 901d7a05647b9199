"""Crawl engine: frontier, link extraction, fetching and round dispatch."""
