"""Contact form schemas."""
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from portfolio_api.core.exceptions import ContactValidationError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 5000

EMAIL_INVALID_MESSAGE = "Please enter a valid email address"
EMAIL_TOO_LONG_MESSAGE = "Email too long"

# Error types that report more than one message for their field
COMBINED_ERRORS = {
    "email_invalid_too_long": (EMAIL_INVALID_MESSAGE, EMAIL_TOO_LONG_MESSAGE),
}

FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "message": "Message",
    "website": "Website",
}


class ContactSubmission(BaseModel):
    """Contact form submission request."""
    name: str
    email: str
    message: str
    # Honeypot - hidden in the form, humans leave it empty
    website: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if len(v) < NAME_MIN_LENGTH:
            raise PydanticCustomError(
                "name_too_short",
                "Name must be at least {min_length} characters",
                {"min_length": NAME_MIN_LENGTH},
            )
        if len(v) > NAME_MAX_LENGTH:
            raise PydanticCustomError("name_too_long", "Name too long")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        too_long = len(v) > EMAIL_MAX_LENGTH
        try:
            # Plain ASCII local parts only
            validate_email(v, check_deliverability=False, allow_smtputf8=False)
            invalid = False
        except EmailNotValidError:
            invalid = True

        if invalid and too_long:
            raise PydanticCustomError("email_invalid_too_long", EMAIL_INVALID_MESSAGE)
        if invalid:
            raise PydanticCustomError("email_invalid", EMAIL_INVALID_MESSAGE)
        if too_long:
            raise PydanticCustomError("email_too_long", EMAIL_TOO_LONG_MESSAGE)
        return v

    @field_validator("message")
    @classmethod
    def check_message(cls, v: str) -> str:
        if len(v) < MESSAGE_MIN_LENGTH:
            raise PydanticCustomError(
                "message_too_short",
                "Message must be at least {min_length} characters",
                {"min_length": MESSAGE_MIN_LENGTH},
            )
        if len(v) > MESSAGE_MAX_LENGTH:
            raise PydanticCustomError("message_too_long", "Message too long")
        return v


class ContactResponse(BaseModel):
    """Contact form submission response."""
    success: bool
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-200 contact response."""
    error: str
    details: Optional[list[FieldError]] = Field(default=None)


def _describe_error(error: dict[str, Any]) -> list[dict[str, str]]:
    field = str(error["loc"][0]) if error.get("loc") else "body"
    label = FIELD_LABELS.get(field, field.capitalize())

    if error["type"] == "missing":
        messages = (f"{label} is required",)
    elif error["type"] == "string_type":
        messages = (f"{label} must be a string",)
    else:
        messages = COMBINED_ERRORS.get(error["type"], (error["msg"],))

    return [{"field": field, "message": message} for message in messages]


def validate_submission(payload: Any) -> ContactSubmission:
    """
    Validate a decoded request body.

    Raises:
        ContactValidationError listing every offending field
    """
    if not isinstance(payload, dict):
        raise ContactValidationError(
            [{"field": "body", "message": "Request body must be a JSON object"}]
        )

    try:
        return ContactSubmission.model_validate(payload)
    except ValidationError as e:
        details = [detail for err in e.errors() for detail in _describe_error(err)]
        raise ContactValidationError(details) from e
