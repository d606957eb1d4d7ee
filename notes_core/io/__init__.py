from notes_core.io import keys, uri

__all__ = ["keys", "uri"]
