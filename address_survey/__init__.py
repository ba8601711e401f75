"""
Address Survey

Capture addresses of unaddressed OpenStreetMap buildings in the field and
publish them as OSM notes.
"""

__version__ = "1.0.0"
