"""
Validation rule set shared by every write endpoint.

Input schemas declare their constraints with pydantic `Field(...)` and
subclass `RecordInput`. `validate_payload` runs a schema over the raw request
body and turns *all* failures into `Violation`s at once, so a client can fix
every field in a single round trip. Nothing here touches the database.
"""
import re
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from karibu.core.exceptions import ValidationFailed, Violation

# ---------------------------------------------------------
# 1. FIELD PATTERNS
# ---------------------------------------------------------
ALPHANUMERIC = r"^[a-zA-Z0-9\s]+$"
LETTERS = r"^[a-zA-Z\s]+$"
PHONE = r"^[0-9]{10,12}$"
NATIONAL_ID = r"^[A-Z0-9]{10,15}$"
TIME_24H = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

# ---------------------------------------------------------
# 2. FALLBACK MESSAGES (by pydantic error type)
# ---------------------------------------------------------
GENERIC_MESSAGES: Dict[str, str] = {
    "missing": "{label} is required",
    "string_type": "{label} must be text",
    "string_too_short": "{label} must be at least {min_length} characters",
    "string_pattern_mismatch": "{label} has an invalid format",
    "greater_than_equal": "{label} must be at least {ge}",
    "int_type": "{label} must be a whole number",
    "int_parsing": "{label} must be a whole number",
    "int_from_float": "{label} must be a whole number",
    "float_type": "{label} must be a number",
    "float_parsing": "{label} must be a number",
    "bool_type": "{label} must be true or false",
    "bool_parsing": "{label} must be true or false",
    "enum": "{label} must be one of {expected}",
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def label_for(field: str) -> str:
    """'salesAgentName' -> 'Sales agent name'"""
    return _CAMEL_BOUNDARY.sub(" ", field).lower().capitalize()


def parse_iso_date(value: Any, message: str) -> datetime:
    """Accepts ISO-8601 dates and datetimes ('2025-01-31', '2025-01-31T10:00:00Z')."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValueError(message)


def reject_bool(value: Any, message: str) -> Any:
    """Lax int parsing turns `true` into 1; quantities must be real numbers."""
    if isinstance(value, bool):
        raise ValueError(message)
    return value


def number_as_text(value: Any) -> Any:
    """Phone numbers sent as JSON numbers are matched as their digits."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class RecordInput(BaseModel):
    """
    Base for request bodies.

    Subclasses may set:
      - `labels`: human name per wire field when the camelCase split reads badly
      - `messages`: exact message per "<wireField>.<errorType>"
      - `default_now`: optional timestamp fields filled with "now" when omitted
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        regex_engine="python-re",
        extra="ignore",
    )

    labels: ClassVar[Dict[str, str]] = {}
    messages: ClassVar[Dict[str, str]] = {}
    default_now: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def message_for(cls, field: str, error: Dict[str, Any]) -> str:
        error_type = error.get("type", "")
        specific = cls.messages.get(f"{field}.{error_type}")
        if specific:
            return specific

        ctx = error.get("ctx") or {}
        if error_type == "value_error" and "error" in ctx:
            return str(ctx["error"])

        template = GENERIC_MESSAGES.get(error_type)
        if template is None:
            return error.get("msg", "Invalid value")
        label = cls.labels.get(field) or label_for(field)
        try:
            return template.format(label=label, **ctx)
        except KeyError:
            return error.get("msg", "Invalid value")

    def normalized(self, now: datetime) -> Dict[str, Any]:
        """Field values in snake_case with omitted timestamps defaulted to `now`."""
        fields = self.model_dump()
        for name in self.default_now:
            if fields.get(name) is None:
                fields[name] = now
        return fields


SchemaT = TypeVar("SchemaT", bound=RecordInput)


def collect_violations(schema: Type[RecordInput], exc: ValidationError) -> List[Violation]:
    violations = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "body"
        violations.append(Violation(field=field, message=schema.message_for(field, error)))
    return violations


def validate_payload(schema: Type[SchemaT], payload: Optional[Dict[str, Any]]) -> SchemaT:
    """
    Returns the parsed input or raises ValidationFailed listing every violation.
    """
    try:
        return schema.model_validate(payload or {})
    except ValidationError as exc:
        raise ValidationFailed(collect_violations(schema, exc)) from None
