"""Late Edition content backend.

Articles, events, albums, staff bios, lookbook and music content stored as
JSON documents in blob storage, with an admin-only write path.
"""

__version__ = "0.1.0"
