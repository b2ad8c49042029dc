"""
Canonical contact schema: field names, storage columns and export ordering.
"""

# Canonical export ordering of the contact attributes
CANONICAL_FIELDS: tuple[str, ...] = (
    "FirstName",
    "LastName",
    "EmailID",
    "JobTitle",
    "Level",
    "JobFunction",
    "Dept",
    "CompanyNumber",
    "DirectNumber",
    "CompanyName",
    "Address1",
    "Address2",
    "City",
    "State",
    "PostalCode",
    "Country",
    "ActiveEmployeeSize",
    "EmployeeSize",
    "Industry",
    "MainIndustry",
    "WebsiteLink",
    "RevenueSize",
    "EmployeeLink",
    "CompanyLink",
)

NATURAL_KEY_FIELD = "EmailID"

ID_FIELD = "RecordID"
CREATED_AT_FIELD = "CreatedAt"
UPDATED_AT_FIELD = "UpdatedAt"
TIMESTAMP_FIELDS: tuple[str, ...] = (CREATED_AT_FIELD, UPDATED_AT_FIELD)

# Fields masked outside of export context
SENSITIVE_FIELDS: tuple[str, ...] = ("EmailID", "DirectNumber", "CompanyNumber")

# Fields matched by the free-text search term
SEARCH_FIELDS: tuple[str, ...] = (
    "FirstName",
    "LastName",
    "EmailID",
    "CompanyName",
    "JobTitle",
    "JobFunction",
)

FIELD_COLUMNS: dict[str, str] = {
    "FirstName": "first_name",
    "LastName": "last_name",
    "EmailID": "email_id",
    "JobTitle": "job_title",
    "Level": "level",
    "JobFunction": "job_function",
    "Dept": "dept",
    "CompanyNumber": "company_number",
    "DirectNumber": "direct_number",
    "CompanyName": "company_name",
    "Address1": "address1",
    "Address2": "address2",
    "City": "city",
    "State": "state",
    "PostalCode": "postal_code",
    "Country": "country",
    "ActiveEmployeeSize": "active_employee_size",
    "EmployeeSize": "employee_size",
    "Industry": "industry",
    "MainIndustry": "main_industry",
    "WebsiteLink": "website_link",
    "RevenueSize": "revenue_size",
    "EmployeeLink": "employee_link",
    "CompanyLink": "company_link",
    ID_FIELD: "record_id",
    CREATED_AT_FIELD: "created_at",
    UPDATED_AT_FIELD: "updated_at",
}

COLUMN_FIELDS: dict[str, str] = {column: field for field, column in FIELD_COLUMNS.items()}

# Every field a caller may project or filter on
PERMITTED_FIELDS: frozenset[str] = frozenset(FIELD_COLUMNS)


def column_for(field_name: str) -> str:
    """Storage column of a canonical field. Raises KeyError for unknown fields."""
    return FIELD_COLUMNS[field_name]


def default_export_fields() -> list[str]:
    """Identifier first, canonical attributes, audit timestamps last."""
    return [ID_FIELD, *CANONICAL_FIELDS, *TIMESTAMP_FIELDS]
