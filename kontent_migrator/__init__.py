"""
Kontent.ai Migrator

Tooling for moving content inside and between Kontent.ai environments.

Supports:
- Copying content items into another content type with automatic field mapping
- Compatibility checks and value conversion between element types
- Dry run previews before any write
- Copying content types from one environment to another
"""

__version__ = "0.1.0"
