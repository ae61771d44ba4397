"""
Domain Layer

Business rules for stored files and their share links. Nothing here
touches Flask, Redis or a storage provider.
"""
