"""
Multi-step form wizard state.

The wizard keeps every entered value for the lifetime of the session and only
recomputes errors for a step when the user explicitly tries to leave it
(``advance``) or submits the whole form (``submit_final``). Typing alone never
surfaces an error.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .messages import DEFAULT_LANGUAGE, resolve_language, response_message
from .schema import SubmissionResult
from .validation import CONTACT_SCHEMA, DATA_REQUEST_SCHEMA, FormSchema


@dataclass(frozen=True)
class StepDefinition:
    key: str
    title: Mapping[str, str]
    fields: Tuple[str, ...]


CONTACT_STEPS = (
    StepDefinition(
        key="inquiry",
        title={"ja": "お問い合わせ内容", "en": "Your Inquiry"},
        fields=("name", "email", "company", "subject", "message", "privacyConsent"),
    ),
)

DATA_REQUEST_STEPS = (
    StepDefinition(
        key="basic_info",
        title={"ja": "基本情報", "en": "Basic Information"},
        fields=("name", "organization", "email"),
    ),
    StepDefinition(
        key="project_details",
        title={"ja": "プロジェクト詳細", "en": "Project Details"},
        fields=(
            "backgroundPurpose", "dataType", "otherDataType", "dataDetails",
            "dataVolume", "deadline", "budget", "otherRequirements",
        ),
    ),
)


class FormWizard:
    """Client-side state machine for one form.

    ``current_step`` moves forward only through a successful ``advance`` and
    backward through ``retreat``. ``completed`` becomes True once the server
    accepts the submission; failures leave all values in place for a retry.
    """

    def __init__(self, schema: FormSchema, steps: Sequence[StepDefinition], language: str = DEFAULT_LANGUAGE):
        if not steps:
            raise ValueError("A wizard needs at least one step")

        known = set(schema.fields)
        seen: Dict[str, str] = {}
        for step in steps:
            for name in step.fields:
                if name not in known:
                    raise ValueError(f"Step '{step.key}' uses field '{name}' missing from the {schema.kind} schema")
                if name in seen:
                    raise ValueError(f"Field '{name}' appears in steps '{seen[name]}' and '{step.key}'")
                seen[name] = step.key

        self.schema = schema
        self.steps: Tuple[StepDefinition, ...] = tuple(steps)
        self.language = resolve_language(language)
        self.current_step = 0
        self.values: Dict[str, Any] = {}
        self.errors: Dict[str, List[str]] = {}
        self.completed = False
        self.last_result: Optional[SubmissionResult] = None
        self._field_steps = seen
        self._submit_lock = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self._submit_lock.locked()

    @property
    def step(self) -> StepDefinition:
        return self.steps[self.current_step]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(name for step in self.steps for name in step.fields)

    def step_index_of(self, field_name: str) -> Optional[int]:
        key = self._field_steps.get(field_name)
        if key is None:
            return None
        return next(i for i, step in enumerate(self.steps) if step.key == key)

    def set_value(self, field_name: str, value: Any) -> None:
        """Record user input; no validation runs here."""
        if field_name not in self._field_steps:
            raise KeyError(f"Unknown field: {field_name}")
        self.values[field_name] = value

    def update(self, values: Mapping[str, Any]) -> None:
        for field_name, value in values.items():
            self.set_value(field_name, value)

    def payload(self) -> Dict[str, Any]:
        payload = dict(self.values)
        payload["language"] = self.language
        return payload

    def _replace_errors(self, fields: Sequence[str], field_errors: Mapping[str, List[str]]) -> None:
        for name in fields:
            self.errors.pop(name, None)
        for name, messages in field_errors.items():
            self.errors[name] = list(messages)

    def _jump_to_first_error(self) -> None:
        indexes = [self.step_index_of(name) for name in self.errors]
        indexes = [i for i in indexes if i is not None]
        if indexes:
            self.current_step = min(indexes)

    def advance(self) -> bool:
        """Validate the current step and move to the next one if it is clean.

        Returns False without moving when the step has violations (their
        messages are stored in ``errors``) or when already on the last step,
        where ``submit_final`` takes over.
        """
        if self.completed or self.is_last_step:
            return False

        fields = self.step.fields
        outcome = self.schema.validate(self.payload(), fields=fields, language=self.language)
        self._replace_errors(fields, outcome.field_errors)
        if not outcome.valid:
            return False

        self.current_step += 1
        return True

    def retreat(self) -> bool:
        """Go back one step without validating; values are kept."""
        if self.completed or self.current_step == 0:
            return False
        self.current_step -= 1
        return True

    def submit_final(self, client) -> SubmissionResult:
        """Validate every step and hand the values to ``client``.

        On a local or server-side validation failure the wizard returns to the
        first step holding an error. ``is_submitting`` is held for the duration
        of the request so repeated clicks, including ones from another thread,
        cannot send a duplicate.
        """
        if not self._submit_lock.acquire(blocking=False):
            return SubmissionResult(success=False, message=response_message("already_submitting", self.language))
        try:
            return self._submit_once(client)
        finally:
            self._submit_lock.release()

    def _submit_once(self, client) -> SubmissionResult:
        if self.completed and self.last_result is not None:
            return self.last_result

        outcome = self.schema.validate(self.payload(), language=self.language)
        self._replace_errors(self.fields, outcome.field_errors)
        if not outcome.valid:
            self._jump_to_first_error()
            self.last_result = SubmissionResult(
                success=False,
                message=response_message("validation_failed", self.language),
                field_errors=dict(outcome.field_errors),
            )
            return self.last_result

        result = client.submit(self.schema.kind, self.payload())
        self.last_result = result
        if result.success:
            self.completed = True
        elif result.field_errors:
            self._replace_errors(self.fields, result.field_errors)
            self._jump_to_first_error()
        return result

    def reset(self) -> None:
        """Start over with an empty form, e.g. after showing the success screen."""
        self.current_step = 0
        self.values = {}
        self.errors = {}
        self.completed = False
        self.last_result = None


def contact_wizard(language: str = DEFAULT_LANGUAGE) -> FormWizard:
    return FormWizard(CONTACT_SCHEMA, CONTACT_STEPS, language)


def data_request_wizard(language: str = DEFAULT_LANGUAGE) -> FormWizard:
    return FormWizard(DATA_REQUEST_SCHEMA, DATA_REQUEST_STEPS, language)
