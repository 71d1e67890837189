"""
Portfolio Contact API Routers
"""
from portfolio_api.api import contact, health

__all__ = [
    "contact",
    "health",
]
