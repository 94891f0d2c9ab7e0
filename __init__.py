"""
Treasure Hunter application.

A FastAPI-powered treasure hunt map: browse and search clues, select
treasures, and see them as markers on a pannable, zoomable map, with each
user's discoveries persisted to the database.
"""
