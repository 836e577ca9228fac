"""
Validation schema shared by the form wizard and the request handler.

Each form is a frozen pydantic model. ``FormSchema.validate`` runs the model over
raw input and folds every violation into a field -> messages map, so the wizard
and the server always agree on what a valid submission is.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic.type_adapter import TypeAdapter
from pydantic_core import PydanticCustomError

from .messages import DEFAULT_LANGUAGE, VALIDATION_MESSAGES, resolve_language, validation_message

DATA_TYPES = ("text", "image", "video", "audio", "sensor", "other")
DataTypeChoice = Literal["text", "image", "video", "audio", "sensor", "other"]

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(value: Any) -> Any:
    if _is_blank(value):
        raise PydanticCustomError("required", "This field is required")
    return value


def _blank_to_none(value: Any) -> Any:
    return None if _is_blank(value) else value


class FormModel(BaseModel):
    """Base for submission models: trimmed strings, camelCase wire names, extra keys ignored."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    language: str = Field(default=DEFAULT_LANGUAGE, validate_default=True)

    @field_validator("language", mode="before")
    @classmethod
    def language_falls_back_to_default(cls, v):
        return resolve_language(v)


class ContactForm(FormModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=254)
    company: Optional[str] = Field(default=None, max_length=200)
    subject: str = Field(min_length=5, max_length=200)
    message: str = Field(min_length=10, max_length=5000)
    privacy_consent: bool = Field(default=False, validate_default=True)

    @field_validator("name", "email", "subject", "message", mode="before")
    @classmethod
    def required_text(cls, v):
        return _require_text(v)

    @field_validator("company", mode="before")
    @classmethod
    def optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v):
        return _validate_email(v)

    @field_validator("privacy_consent")
    @classmethod
    def consent_must_be_given(cls, v):
        if v is not True:
            raise PydanticCustomError("consent_required", "Privacy policy consent is required")
        return v


class DataRequestBasicInfo(FormModel):
    name: str = Field(min_length=1, max_length=100)
    organization: Optional[str] = Field(default=None, max_length=200)
    email: str = Field(max_length=254)

    # Validator names differ from DataRequestProjectDetails so that
    # DataRequestForm inherits both sets instead of one shadowing the other.
    @field_validator("name", "email", mode="before")
    @classmethod
    def basic_info_required(cls, v):
        return _require_text(v)

    @field_validator("organization", mode="before")
    @classmethod
    def basic_info_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v):
        return _validate_email(v)


class DataRequestProjectDetails(FormModel):
    background_purpose: str = Field(min_length=5, max_length=1000)
    data_type: List[DataTypeChoice] = Field(default_factory=list)
    other_data_type: Optional[str] = Field(default=None, max_length=200, validate_default=True)
    data_details: Optional[str] = Field(default=None, max_length=2000)
    data_volume: Optional[str] = Field(default=None, max_length=200)
    deadline: Optional[str] = Field(default=None, max_length=200)
    budget: Optional[str] = Field(default=None, max_length=200)
    other_requirements: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("background_purpose", mode="before")
    @classmethod
    def project_details_required(cls, v):
        return _require_text(v)

    @field_validator(
        "other_data_type", "data_details", "data_volume", "deadline", "budget", "other_requirements",
        mode="before",
    )
    @classmethod
    def project_details_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("data_type", mode="before")
    @classmethod
    def coerce_to_list(cls, v):
        # A single selected category may arrive as a bare string
        if _is_blank(v):
            return []
        if isinstance(v, str):
            return [v.strip()]
        if isinstance(v, (tuple, set, frozenset)):
            return list(v)
        return v

    @field_validator("data_type")
    @classmethod
    def drop_duplicates(cls, v):
        return list(dict.fromkeys(v))

    @field_validator("other_data_type")
    @classmethod
    def other_needs_description(cls, v, info: ValidationInfo):
        if "other" in info.data.get("data_type", []) and v is None:
            raise PydanticCustomError("other_data_type_required", "Describe the other data type")
        return v


class DataRequestForm(DataRequestBasicInfo, DataRequestProjectDetails):
    pass


def _validate_email(value: str) -> str:
    try:
        return _EMAIL_ADAPTER.validate_python(value)
    except (ValidationError, TypeError):
        raise PydanticCustomError("email_invalid", "value is not a valid email address")


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    data: Optional[Dict[str, Any]] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    model: Optional[FormModel] = None


def _error_code(error: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Map a pydantic error onto a message code and its format context."""
    kind = error["type"]
    ctx = error.get("ctx") or {}
    if kind == "missing":
        return "required", {}
    if kind == "string_too_short":
        return "min_length", {"min_length": ctx.get("min_length")}
    if kind == "string_too_long":
        return "max_length", {"max_length": ctx.get("max_length")}
    if kind == "too_short":
        return "choice_required", {}
    if kind in ("literal_error", "enum"):
        return "invalid_choice", {}
    if kind in VALIDATION_MESSAGES[DEFAULT_LANGUAGE]:
        return kind, ctx
    return "invalid_type", {}


def collect_field_errors(exc: ValidationError, language: str) -> Dict[str, List[str]]:
    """Fold pydantic errors into wire field name -> ordered unique messages."""
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        field_name = str(loc[0])
        code, ctx = _error_code(error)
        message = validation_message(code, language, ctx)
        messages = field_errors.setdefault(field_name, [])
        if message not in messages:
            messages.append(message)
    return field_errors


@dataclass(frozen=True)
class FormSchema:
    """Immutable description of one submittable form."""

    kind: str
    model: Type[FormModel]

    @property
    def fields(self) -> Tuple[str, ...]:
        """Wire names of every user-facing field (the language tag excluded)."""
        return tuple(
            info.alias or name
            for name, info in self.model.model_fields.items()
            if name != "language"
        )

    def validate(self, data: Any, fields: Sequence[str] = None, language: str = None) -> ValidationOutcome:
        """Validate ``data``; restrict reported errors to ``fields`` when given.

        Normalized data is only returned when the whole form is valid, so a
        step-restricted check that passes carries ``data=None`` if other steps
        still hold violations.
        """
        if not isinstance(data, Mapping):
            data = {}
        if language is None:
            language = resolve_language(data.get("language"))

        try:
            model = self.model.model_validate(dict(data))
        except ValidationError as exc:
            field_errors = collect_field_errors(exc, language)
            if fields is not None:
                wanted = set(fields)
                field_errors = {k: v for k, v in field_errors.items() if k in wanted}
            return ValidationOutcome(valid=not field_errors, field_errors=field_errors)

        return ValidationOutcome(
            valid=True,
            data=model.model_dump(by_alias=True),
            model=model,
        )


CONTACT_SCHEMA = FormSchema(kind="contact", model=ContactForm)
DATA_REQUEST_SCHEMA = FormSchema(kind="request-data", model=DataRequestForm)

FORM_SCHEMAS: Mapping[str, FormSchema] = MappingProxyType({
    CONTACT_SCHEMA.kind: CONTACT_SCHEMA,
    DATA_REQUEST_SCHEMA.kind: DATA_REQUEST_SCHEMA,
})


def validate(kind: str, data: Any, fields: Sequence[str] = None, language: str = None) -> ValidationOutcome:
    """Validate ``data`` against the schema registered for ``kind``."""
    try:
        schema = FORM_SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"Unknown form kind: {kind}")
    return schema.validate(data, fields=fields, language=language)
