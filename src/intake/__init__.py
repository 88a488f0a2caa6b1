"""
Student Intake - application processing pipeline for Bright Future Academy.
"""

__version__ = "0.1.0"
