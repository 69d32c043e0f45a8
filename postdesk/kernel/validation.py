"""
Postdesk Kernel — Draft Validation

Checks a draft's fields against FIELD_RULES before anything reaches the
orchestrator. At most one message per field: the first violated bound wins,
and fields are reported in declaration order (title, description, content).

Pure and synchronous. Views call validate_field on every change and
validate on submit.
"""

from __future__ import annotations

from postdesk.kernel.types import EDITABLE_FIELDS, FIELD_RULES, PostDraft, ValidationResult

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(draft: PostDraft) -> ValidationResult:
    """
    Validate every editable field of a draft.
    Returns a ValidationResult; `result.valid` is True when no field failed.
    """
    errors: dict[str, str] = {}
    for name in EDITABLE_FIELDS:
        message = validate_field(name, getattr(draft, name))
        if message is not None:
            errors[name] = message
    return ValidationResult(errors=errors)


def validate_field(name: str, value: str) -> str | None:
    """Return the message for the first bound `value` violates, or None."""
    if name not in FIELD_RULES:
        raise KeyError(f"Unknown post field: {name}")

    min_length, max_length = FIELD_RULES[name]
    label = name.capitalize()

    if len(value) < min_length:
        return f"{label} must be at least {min_length} characters."
    if len(value) > max_length:
        return f"{label} must not be longer than {max_length} characters."
    return None
