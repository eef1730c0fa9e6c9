"""
Quiz export rendering engine.

Renders quiz collections to printable HTML, PDF and DOCX documents and to
editable XLSX and JSON files.
"""

__version__ = "0.1.0"
