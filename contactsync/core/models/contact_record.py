"""
ContactRecord model representing one contact in the canonical schema.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from contactsync.core.schema.fields import COLUMN_FIELDS


class ContactRecord(BaseModel):
    """
    A contact with the 24 canonical string attributes.

    Attributes are stored under snake_case names that double as storage
    column names; the canonical header spelling (e.g. "EmailID") is the
    alias, so ``model_dump(by_alias=True)`` yields the canonical row shape.
    Every attribute is a string and is never None: blank input becomes "".
    """

    first_name: str = Field("", alias="FirstName")
    last_name: str = Field("", alias="LastName")
    email_id: str = Field("", alias="EmailID")
    job_title: str = Field("", alias="JobTitle")
    level: str = Field("", alias="Level")
    job_function: str = Field("", alias="JobFunction")
    dept: str = Field("", alias="Dept")
    company_number: str = Field("", alias="CompanyNumber")
    direct_number: str = Field("", alias="DirectNumber")
    company_name: str = Field("", alias="CompanyName")
    address1: str = Field("", alias="Address1")
    address2: str = Field("", alias="Address2")
    city: str = Field("", alias="City")
    state: str = Field("", alias="State")
    postal_code: str = Field("", alias="PostalCode")
    country: str = Field("", alias="Country")
    active_employee_size: str = Field("", alias="ActiveEmployeeSize")
    employee_size: str = Field("", alias="EmployeeSize")
    industry: str = Field("", alias="Industry")
    main_industry: str = Field("", alias="MainIndustry")
    website_link: str = Field("", alias="WebsiteLink")
    revenue_size: str = Field("", alias="RevenueSize")
    employee_link: str = Field("", alias="EmployeeLink")
    company_link: str = Field("", alias="CompanyLink")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "FirstName": "Ada",
                "LastName": "Lovelace",
                "EmailID": "ada@example.com",
                "JobTitle": "Head of Analytics",
                "CompanyName": "Analytical Engines Ltd",
                "Country": "United Kingdom",
            }
        }

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_string(cls, value: Any) -> str:
        """Blank values become "", anything else its string form."""
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @property
    def natural_key(self) -> str:
        """EmailID stripped of surrounding whitespace; "" means no key."""
        return self.email_id.strip()

    def to_columns(self) -> dict[str, str]:
        """Attribute values keyed by storage column."""
        return self.model_dump(by_alias=False)

    @classmethod
    def from_columns(cls, row: dict[str, Any]) -> "ContactRecord":
        """Build from a storage row, ignoring metadata columns."""
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})


def columns_to_fields(row: dict[str, Any]) -> dict[str, Any]:
    """Rename a storage row's columns to canonical field names."""
    return {COLUMN_FIELDS.get(column, column): value for column, value in row.items()}
