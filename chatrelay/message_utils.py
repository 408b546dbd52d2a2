"""
Helper functions for request parsing and validation
"""

from pydantic import ValidationError

from .exceptions import MalformedRequest, MissingField
from .models import ChatCompletionRequest, DEFAULT_MODEL

MISSING_MESSAGES = "Missing or invalid 'messages' in request body"


def _validation_failure(error: ValidationError) -> Exception:
    """Map pydantic errors onto the request error taxonomy"""
    errors = error.errors()
    first = errors[0]

    if first["type"] == "json_invalid":
        return MalformedRequest(f"Invalid JSON in request body: {first['msg']}")
    if not first["loc"]:
        # top-level value is not a JSON object
        return MalformedRequest("Request body must be a JSON object")
    if any(err["loc"][0] == "messages" for err in errors):
        return MissingField(MISSING_MESSAGES)
    return MalformedRequest(f"Invalid '{first['loc'][0]}' in request body: {first['msg']}")


def parse_completion_request(body: bytes, default_model: str = DEFAULT_MODEL) -> ChatCompletionRequest:
    """Parse and validate a chat completion request body"""
    try:
        request = ChatCompletionRequest.model_validate_json(body)
    except ValidationError as e:
        raise _validation_failure(e)

    if not request.model:
        request.model = default_model
    return request
