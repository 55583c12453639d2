"""
OSM Border Extractor

Extracts administrative, claimed and disputed boundary lines from
OpenStreetMap files. Every way that is a member of a boundary relation is
written out once, together with its minimum parent admin level, dividing line,
dispute and maritime attributes and its line geometry.
"""

__version__ = "0.3.0"
