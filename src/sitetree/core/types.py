"""Core type definitions."""

from typing import NewType

# Output-relative path of a rendered page (e.g., "Guide/intro.html")
# Always forward-slash joined, never starts with "./" or "/"
TargetPath = NewType("TargetPath", str)
