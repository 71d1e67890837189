"""
Portfolio Contact API
Backend for the portfolio site's contact form.
"""

__version__ = "1.0.0"
