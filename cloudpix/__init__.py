"""
CloudPix backend.

File storage with expiring, revocable share links.
"""
