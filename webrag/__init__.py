"""Scrape a web page, index it in a vector store and answer questions about it."""

__version__ = "0.1.0"
