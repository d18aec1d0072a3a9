"""Inkpost — a small authenticated blogging API.

Users register or log in to receive a signed bearer token, then create,
read, update and delete the posts they own.
"""

__version__ = "0.1.0"
