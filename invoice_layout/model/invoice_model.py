"""Billing data consumed by the layout engine."""
from __future__ import annotations

import datetime
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from invoice_layout.model.errors import ValidationError

Pair = Tuple[str, Optional[str]]

CONTACT_LABELS: Tuple[str, ...] = (
    "Company Name: ",
    "Contact Person: ",
    "Address: ",
    "Phone: ",
    "Email: ",
)

BANK_LABEL_KEYS: Dict[str, str] = {
    "Bank Name": "bank_name",
    "Beneficiary Name": "beneficiary_name",
    "Account Number": "account_number",
    "SWIFT Code": "swift_code",
    "Routing Number": "routing_number",
    "Branch": "branch",
    "Bank Address": "bank_address",
    "IBAN": "iban",
    "BIC": "bic",
    "Sort Code": "sort_code",
    "Routing Number (ABA)": "routing_number_aba",
    "Account Type": "account_type",
    "Branch Code (BSB)": "branch_code_bsb",
}

_PARENTHESISED = re.compile(r"\s*\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class BillLine:
    """One billed job; immutable for the duration of a layout pass."""

    date: Union[datetime.date, str, None]
    description: str
    quantity: float = 0
    unit_price: float = 0

    @classmethod
    def blank(cls) -> "BillLine":
        """Synthetic padding line used to reach the table's row floor."""
        return cls(date="", description="", quantity=0, unit_price=0)

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price

    @property
    def is_blank(self) -> bool:
        return not self.date and not self.description and not self.quantity and not self.unit_price


@dataclass(frozen=True, slots=True)
class PartyContact:
    """Ordered (label, value) pairs describing one invoice party."""

    entries: Tuple[Pair, ...]

    @classmethod
    def from_fields(
        cls,
        company_name: Optional[str] = None,
        contact_person: Optional[str] = None,
        address: Optional[str] = None,
        contact_number: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "PartyContact":
        values = tuple(
            None if value is None else str(value)
            for value in (company_name, contact_person, address, contact_number, email)
        )
        return cls(entries=tuple(zip(CONTACT_LABELS, values)))

    def value_of(self, label: str) -> Optional[str]:
        for entry_label, value in self.entries:
            if entry_label.rstrip(": ") == label.rstrip(": "):
                return value
        return None

    @property
    def company_name(self) -> Optional[str]:
        return self.value_of("Company Name")

    @property
    def contact_person(self) -> Optional[str]:
        return self.value_of("Contact Person")

    @property
    def contact_number(self) -> Optional[str]:
        return self.value_of("Phone")

    @property
    def email(self) -> Optional[str]:
        return self.value_of("Email")


@dataclass(frozen=True, slots=True)
class InvoiceParties:
    """Issuer and recipient plus the invoice-level billing terms."""

    issuer: PartyContact
    recipient: PartyContact
    invoice_number: str = ""
    currency: str = "$"
    issued_on: Optional[datetime.date] = None
    discount_rate: float = 0.0
    tax_rate: float = 0.0


def bank_field_key(label: str) -> str:
    """Map a display label to the account attribute holding its value."""
    if label in BANK_LABEL_KEYS:
        return BANK_LABEL_KEYS[label]
    key = _PARENTHESISED.sub("", label.lower())
    return _WHITESPACE.sub("_", key.strip())


@dataclass(frozen=True, slots=True)
class BankAccount:
    """Bank account whose displayed fields are driven by ``field_labels``."""

    field_labels: Tuple[str, ...]
    values: Mapping[str, Optional[str]] = field(default_factory=dict)
    header: Optional[str] = None

    def pairs(self) -> List[Pair]:
        """Return (``"Label: "``, value) pairs, skipping absent values entirely."""
        pairs: List[Pair] = []
        for label in self.field_labels:
            value = self.values.get(bank_field_key(label))
            if value is None or value == "":
                continue
            pairs.append((f"{label}: ", str(value)))
        return pairs


def validate_inputs(
    parties: InvoiceParties,
    bill_lines: Sequence[BillLine],
    bank_accounts: Sequence[BankAccount],
) -> None:
    """Reject structurally incomplete input before any grid writes happen."""
    for role, contact in (("issuer", parties.issuer), ("recipient", parties.recipient)):
        if len(contact.entries) != len(CONTACT_LABELS):
            raise ValidationError(
                f"{role} contact must have {len(CONTACT_LABELS)} entries, got {len(contact.entries)}"
            )

    for index, line in enumerate(bill_lines):
        if line.quantity < 0 or line.unit_price < 0:
            raise ValidationError(f"Bill line {index + 1} has a negative quantity or unit price")

    if parties.discount_rate < 0 or parties.tax_rate < 0:
        raise ValidationError("Discount and tax rates must not be negative")

    if len(bank_accounts) != 2:
        raise ValidationError(f"Exactly two bank accounts are required, got {len(bank_accounts)}")
    for position, account in zip(("primary", "secondary"), bank_accounts):
        if not account.pairs():
            raise ValidationError(f"The {position} bank account has no displayable fields")
