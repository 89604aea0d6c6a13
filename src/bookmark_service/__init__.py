"""
Bookmark service package.

A small FastAPI application that stores bookmarks in a relational database
and serves a server-rendered list with endpoints to add and delete entries.
"""

__version__ = "0.1.0"
