"""
Seed storage package.

Holds the one secret the service works with. Routes and the CLI only talk to
the SeedStore interface, so tests swap in MemorySeedStore.
"""

from .seed_store import (
    FileSeedStore,
    MemorySeedStore,
    SeedStore,
    default_seed_path,
)

__all__ = ["SeedStore", "FileSeedStore", "MemorySeedStore", "default_seed_path"]
