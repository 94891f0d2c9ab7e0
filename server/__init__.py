"""
Server modules for the Treasure Hunter application.

This package contains FastAPI router modules for the treasure catalog,
search, discoveries, the map viewport, authentication and the
notification stream.
"""
