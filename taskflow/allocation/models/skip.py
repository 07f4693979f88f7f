"""Skip periods: date ranges an agent marks as away from outreach.

The outreach UI posts ``referenceid`` / ``startdate`` / ``enddate`` /
``status``; those names are accepted as aliases of the field names.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class SkipCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(min_length=1, validation_alias=AliasChoices("referenceid", "agent_id"))
    start_date: date = Field(validation_alias=AliasChoices("startdate", "start_date"))
    end_date: date = Field(validation_alias=AliasChoices("enddate", "end_date"))
    status: str = Field(min_length=1, description="Free-form label chosen by the UI (e.g. 'Leave').")

    @model_validator(mode="after")
    def _check_range(self) -> SkipCreate:
        if self.end_date < self.start_date:
            msg = f"enddate ({self.end_date}) is before startdate ({self.start_date})"
            raise ValueError(msg)
        return self


class SkipPeriod(BaseModel):
    """A stored skip period (inclusive on both ends)."""

    model_config = ConfigDict(from_attributes=True)

    skip_id: str
    agent_id: str
    start_date: date
    end_date: date
    status: str
    created_at: datetime | None = None
