from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from vodtimer.api.models import EventDraft
from vodtimer.clock import add_years
from vodtimer.errors import ValidationFailed
from vodtimer.today_queue import offset_seconds


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators besides the draft itself."""

    today: date


class DraftValidator(ABC):
    """A small, composable validation unit for an incoming event draft."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, draft: EventDraft) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class NameValidator(DraftValidator):
    def validate(self, *, ctx: ValidationContext, draft: EventDraft) -> None:
        if not draft.name.strip():
            raise ValidationFailed("Event name must not be blank")


@dataclass(frozen=True, slots=True)
class DateWindowValidator(DraftValidator):
    """The scheduled date must fall within [today, today + max_years]."""

    max_years: int = 1

    def validate(self, *, ctx: ValidationContext, draft: EventDraft) -> None:
        latest = add_years(ctx.today, self.max_years)
        if draft.scheduled_date > latest:
            raise ValidationFailed(
                f"Scheduled date {draft.scheduled_date.isoformat()} is more than "
                f"{self.max_years} year(s) ahead (latest allowed: {latest.isoformat()})"
            )
        if draft.scheduled_date < ctx.today:
            raise ValidationFailed(f"Scheduled date {draft.scheduled_date.isoformat()} is in the past")


def check_offset_order(draft: EventDraft) -> None:
    """Raise `ValidationFailed` unless the segment ends strictly after it starts."""

    if offset_seconds(draft.start_offset) >= offset_seconds(draft.end_offset):
        raise ValidationFailed(
            f"Start offset {draft.start_offset.isoformat()} must be before "
            f"end offset {draft.end_offset.isoformat()}"
        )


@dataclass(frozen=True, slots=True)
class OffsetOrderValidator(DraftValidator):
    def validate(self, *, ctx: ValidationContext, draft: EventDraft) -> None:
        check_offset_order(draft)


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[DraftValidator, ...]

    def validate(self, *, ctx: ValidationContext, draft: EventDraft) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, draft=draft)


DEFAULT_DRAFT_PIPELINE = ValidatorPipeline(
    validators=(
        NameValidator(),
        DateWindowValidator(),
        OffsetOrderValidator(),
    )
)


def validate_draft(draft: EventDraft, *, today: date) -> None:
    DEFAULT_DRAFT_PIPELINE.validate(ctx=ValidationContext(today=today), draft=draft)
