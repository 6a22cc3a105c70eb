"""Smoke runner that verifies a live echo server route by route."""
