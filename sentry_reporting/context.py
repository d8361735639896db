# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Request context models and enrichment of capture options.

Every captured event carries the acting user and their company so events can
be filtered and attributed without each call site repeating the same data.
"""

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping


@dataclass(frozen=True)
class UserContext:
    """The authenticated user of the current request.

    Attributes:
        id: Unique identifier for the user
        username: Login name
        first_name: Given name
        last_name: Family name
        email: Email address
        phone: Phone number
        two_factor_auth: Whether two-factor authentication is enabled
        email_confirm: Whether the email address is confirmed
        phone_confirm: Whether the phone number is confirmed
        country: Country code or name
        reg_date: Registration date
        last_auth: Date of the last successful authentication
    """
    id: Any
    username: str | None = None
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    two_factor_auth: bool = False
    email_confirm: bool = False
    phone_confirm: bool = False
    country: str | None = None
    reg_date: Any = None
    last_auth: Any = None

    @property
    def name(self) -> str:
        """Display name built from first and last name."""
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class CompanyContext:
    """The tenant the current request acts on behalf of."""
    id: Any
    name: str | None = None


@dataclass(frozen=True)
class RequestContext:
    """Per-request context used to enrich captured events.

    Attributes:
        user: Current user, if any
        company: Current company, if any
        ip_address: Client IP address of the request
    """
    user: UserContext | None = None
    company: CompanyContext | None = None
    ip_address: str | None = None

    def user_data(self) -> dict[str, Any]:
        """Build the ``user`` mapping sent with events."""
        data: dict[str, Any] = {}
        if self.user is not None:
            user = self.user
            data.update({
                "id": user.id,
                "username": user.username,
                "name": user.name,
                "email": user.email,
                "phone": user.phone,
                "two_factor_auth": user.two_factor_auth,
                "email_confirm": user.email_confirm,
                "phone_confirm": user.phone_confirm,
                "country": user.country,
                "reg_date": user.reg_date,
                "last_auth": user.last_auth,
                "ip_address": self.ip_address,
            })
        if self.company is not None:
            data.update({
                "company_id": self.company.id,
                "company_name": self.company.name,
            })
        return data


def merge_options(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge two mappings; values in ``overrides`` win.

    Nested mappings present on both sides are merged key by key.
    """
    merged: dict[str, Any] = dict(defaults)
    for key, value in overrides.items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_options(existing, value)
        else:
            merged[key] = value
    return merged


def process_options(
    options: MutableMapping[str, Any],
    extra_variables: Mapping[str, Any] | None = None,
    context: RequestContext | None = None,
) -> MutableMapping[str, Any]:
    """Enrich capture options in place with user, company and extra data.

    Values already present in ``options`` are never overwritten.

    Args:
        options: Capture options to update
        extra_variables: Default extra data for every event
        context: Current request context

    Returns:
        The same ``options`` mapping
    """
    if context is not None:
        user_data = context.user_data()
        if user_data:
            options["user"] = merge_options(user_data, options.get("user") or {})

    options["extra"] = merge_options(extra_variables or {}, options.get("extra") or {})
    return options
