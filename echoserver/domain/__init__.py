"""Pure domain pieces: request views, canned replies, static pages.

These modules are free of FastAPI/HTTP concerns so they can be unit-tested
and reused by both the server and the smoke runner.
"""
__all__ = ["canned", "pages", "request"]
