"""
floorgen: deterministic procedural floor layouts built from room templates.
"""

__version__ = "0.3.0"
