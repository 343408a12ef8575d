"""Activity blocks - the recurring windows of a user's day

Components:
    catalog.py: CRUD, name lookup, current block, per-day task assignment
    defaults.py: Six starter blocks seeded when a catalog is empty
"""

from cadence.blocks.catalog import BlockCatalog, InvalidBlockError, validate_block
from cadence.blocks.defaults import DEFAULT_BLOCKS

__all__ = ["DEFAULT_BLOCKS", "BlockCatalog", "InvalidBlockError", "validate_block"]
