"""
Form validation helpers.

Handlers receive urlencoded or multipart form data and validate it against a
pydantic model. Failures are reported as a field -> [messages] map, which the
application turns into a 400 response.
"""
from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.datastructures import FormData

ModelT = TypeVar("ModelT", bound=BaseModel)

FieldErrors = Dict[str, List[str]]


class FormValidationError(Exception):
    def __init__(self, field_errors: FieldErrors):
        self.field_errors = field_errors
        super().__init__(f"Invalid form fields: {', '.join(field_errors)}")


def field_errors_from(exc: ValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[0] if loc else "_form"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


def form_to_dict(form: FormData) -> Dict[str, Any]:
    """Flatten form data; for repeated keys the last value wins."""
    return {key: value for key, value in form.multi_items()}


def validate_form(schema: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    try:
        return schema.model_validate(dict(data))
    except ValidationError as e:
        raise FormValidationError(field_errors_from(e))
