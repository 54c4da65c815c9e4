import re
from datetime import datetime, time

from pydantic import BaseModel, Field, field_validator, model_validator

from psw_backend.core import config

TIME_PATTERN = re.compile(r'^\d{1,2}:\d{2}$')


def parse_clock_time(value) -> time:
    """Parse a 24-hour ``H:MM`` string (whitespace ignored) into a minute-precision time."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    if not isinstance(value, str):
        raise ValueError('Time must be a string in H:MM format.')

    normalized = re.sub(r'\s+', '', value)
    if not TIME_PATTERN.match(normalized):
        raise ValueError('Time must be in H:MM format.')

    try:
        return datetime.strptime(normalized, '%H:%M').time()
    except ValueError as exc:
        raise ValueError('Time must be a valid 24-hour time.') from exc


class SlotPayload(BaseModel):
    id: int | None = None
    start_time: time
    end_time: time
    slot_duration_minutes: int = Field(default=config.DEFAULT_SLOT_DURATION_MINUTES, ge=1)
    is_active: bool = True

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def validate_clock_time(cls, value) -> time:
        return parse_clock_time(value)

    @field_validator('slot_duration_minutes', mode='before')
    @classmethod
    def default_missing_duration(cls, value):
        if value is None:
            return config.DEFAULT_SLOT_DURATION_MINUTES
        return value


class FlatSlotPayload(SlotPayload):
    """Slot submitted outside a day entry; names its own weekday."""

    day_of_week: int = Field(ge=0, le=6)


class DayPayload(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    is_available: bool
    slots: list[SlotPayload] = Field(default_factory=list)

    @field_validator('slots', mode='before')
    @classmethod
    def default_missing_slots(cls, value):
        return [] if value is None else value


class SyncAvailabilityRequest(BaseModel):
    min_booking_slot: int | None = None
    days: list[DayPayload] = Field(default_factory=list)
    slots: list[FlatSlotPayload] = Field(default_factory=list)

    @field_validator('min_booking_slot')
    @classmethod
    def validate_min_booking_slot(cls, value: int | None) -> int | None:
        if value is None:
            return None

        if value not in config.MIN_BOOKING_SLOT_CHOICES:
            choices = ', '.join(str(choice) for choice in config.MIN_BOOKING_SLOT_CHOICES)
            raise ValueError(f'Minimum booking slot must be one of {choices}.')

        return value

    @field_validator('days', 'slots', mode='before')
    @classmethod
    def default_missing_lists(cls, value):
        return [] if value is None else value

    @model_validator(mode='after')
    def validate_unique_days(self) -> 'SyncAvailabilityRequest':
        seen: set[int] = set()
        for day in self.days:
            if day.day_of_week in seen:
                raise ValueError(f'Day {day.day_of_week} is listed more than once.')
            seen.add(day.day_of_week)

        return self


class AvailabilitySlotResponse(BaseModel):
    id: int
    availability_day_id: int
    start_time: str
    end_time: str
    slot_duration_minutes: int
    is_active: bool
    start_time_formatted: str
    end_time_formatted: str


class AvailabilityDayResponse(BaseModel):
    id: int
    day_of_week: int
    is_available: bool
    slots: list[AvailabilitySlotResponse]


class ScheduleResponse(BaseModel):
    min_booking_slot: int
    days: list[AvailabilityDayResponse]
