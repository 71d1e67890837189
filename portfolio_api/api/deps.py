"""
FastAPI Dependencies
Process-wide contact service, overridable in tests via dependency_overrides.
"""
from typing import Annotated, Optional

from fastapi import Depends

from portfolio_api.core.config import settings
from portfolio_api.services.contact import ContactService, create_contact_service

_contact_service: Optional[ContactService] = None


def get_contact_service() -> ContactService:
    """Get or create the global contact service."""
    global _contact_service
    if _contact_service is None:
        _contact_service = create_contact_service(settings)
    return _contact_service


async def close_contact_service() -> None:
    """Close the global contact service."""
    global _contact_service
    if _contact_service is not None:
        await _contact_service.close()
        _contact_service = None


ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
