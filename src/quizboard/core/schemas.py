"""Pydantic contract every ingested question record must satisfy."""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from .errors import MalformedRecordError
from .models import OPTION_KEYS, QuestionRecord


class QuestionPayload(BaseModel):
    """Format-agnostic shape of one question as supplied by a record source."""

    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(..., min_length=1)
    value: PositiveInt
    prompt: str = Field(..., min_length=1)
    options: Dict[str, str]
    correct_option: str

    @field_validator("options", mode="before")
    @classmethod
    def _normalize_options(cls, raw: Any) -> Any:
        if not isinstance(raw, Mapping):
            return raw
        options = {str(key).strip().upper(): value for key, value in raw.items()}
        missing = [key for key in OPTION_KEYS if not options.get(key)]
        if missing:
            raise ValueError(f"missing option text for {', '.join(missing)}")
        # Keep A-D order regardless of the source's ordering.
        return {key: options[key] for key in OPTION_KEYS}

    @field_validator("correct_option", mode="before")
    @classmethod
    def _normalize_correct_option(cls, raw: Any) -> Any:
        if not isinstance(raw, str):
            return raw
        letter = raw.strip().upper()
        if letter not in OPTION_KEYS:
            raise ValueError(f"correct option must be one of {'/'.join(OPTION_KEYS)}, got {raw!r}")
        return letter

    def to_record(self) -> QuestionRecord:
        return QuestionRecord(
            category=self.category,
            value=self.value,
            prompt=self.prompt,
            options=self.options,
            correct_option=self.correct_option,
        )


def validate_record(*, source_id: str, index: int, payload: Mapping[str, Any]) -> QuestionRecord:
    """Validate one raw record or raise :class:`MalformedRecordError`."""
    try:
        return QuestionPayload(**payload).to_record()
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        fields = ", ".join(".".join(str(part) for part in err["loc"]) or "record" for err in errors)
        raise MalformedRecordError(
            source_id,
            f"invalid field(s): {fields}",
            index=index,
            errors=errors,
        ) from exc


__all__ = ["QuestionPayload", "validate_record"]
