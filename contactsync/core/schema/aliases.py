"""
Accepted source header spellings for each canonical field.

For every canonical field the spellings are listed in priority order; the
canonical name itself always comes first.
"""

from collections.abc import Mapping, Sequence

from .fields import CANONICAL_FIELDS

BUILTIN_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "FirstName": ("FirstName", "First Name"),
    "LastName": ("LastName", "Last Name"),
    "EmailID": ("EmailID", "Email ID"),
    "JobTitle": ("JobTitle", "Job Title"),
    "Level": ("Level",),
    "JobFunction": ("JobFunction", "Job Function"),
    "Dept": ("Dept", "Department"),
    "CompanyNumber": ("CompanyNumber", "Company Number"),
    "DirectNumber": ("DirectNumber", "Direct Number"),
    "CompanyName": ("CompanyName", "Company Name"),
    "Address1": ("Address1", "Address 1"),
    "Address2": ("Address2", "Address 2"),
    "City": ("City",),
    "State": ("State",),
    "PostalCode": ("PostalCode", "Postal Code"),
    "Country": ("Country",),
    "ActiveEmployeeSize": ("ActiveEmployeeSize", "Active Employee Size"),
    "EmployeeSize": ("EmployeeSize", "Employee Size"),
    "Industry": ("Industry",),
    "MainIndustry": ("MainIndustry", "Main Industry"),
    "WebsiteLink": ("WebsiteLink", "Website Link"),
    "RevenueSize": ("RevenueSize", "Revenue Size"),
    "EmployeeLink": ("EmployeeLink", "Employee Link"),
    "CompanyLink": ("CompanyLink", "Company Link"),
}


def merge_aliases(
    extra: Mapping[str, Sequence[str]] | None = None,
    base: Mapping[str, Sequence[str]] = BUILTIN_HEADER_ALIASES,
) -> dict[str, tuple[str, ...]]:
    """
    Append extra spellings after the existing ones for each field.

    Spellings already present are not repeated, so built-in priority is kept.

    Raises:
        KeyError: If ``extra`` names a field outside the canonical schema
    """
    merged = {field: tuple(base.get(field, (field,))) for field in CANONICAL_FIELDS}
    for field, spellings in (extra or {}).items():
        if field not in merged:
            raise KeyError(field)
        current = list(merged[field])
        for spelling in spellings:
            if spelling not in current:
                current.append(spelling)
        merged[field] = tuple(current)
    return merged
