from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

# request parts pydantic prefixes to an error location
_LOCATIONS = {"body", "query", "path"}


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


def field_errors(raw: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Flatten pydantic error dicts into FieldErrors keyed by the JSON field name."""
    return [
        FieldError(".".join(str(part) for part in e["loc"] if part not in _LOCATIONS), e["msg"])
        for e in raw
    ]


class HospitalError(Exception):
    """Base for domain failures that map to an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(HospitalError):
    status_code = 400

    def __init__(self, errors: list[FieldError], message: str = "Validation error") -> None:
        super().__init__(message)
        self.errors = errors

    def __str__(self) -> str:
        return "; ".join(f"{e.field}: {e.message}" for e in self.errors) or self.message


class NotFoundError(HospitalError):
    status_code = 404


class ConflictError(HospitalError):
    status_code = 409
