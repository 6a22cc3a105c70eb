"""Request dispatching and listener lifecycle."""
__all__ = ["dispatcher", "lifecycle", "listener"]
