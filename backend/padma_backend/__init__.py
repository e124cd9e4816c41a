"""
Padma Backend - registers CMS component schemas from descriptor files
"""

__version__ = "0.1.0"
