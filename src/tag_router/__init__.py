"""
Tag Router - place files into folders chosen by a [Tag] in their name.

This package provides functionality to:
- Extract the first [Tag] from a filename
- Map tags to destination folders (case-insensitive, with a default folder)
- Sanitize folder and file names for the filesystem
- Move or copy the file, adding " (1)", " (2)" suffixes on name collisions
"""

__version__ = "0.1.0"
__author__ = "Tag Router Team"
