"""Build engine inputs from the JSON payload the portal posts."""
from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from invoice_layout.model.errors import ValidationError
from invoice_layout.model.invoice_model import BankAccount, BillLine, InvoiceParties, PartyContact
from invoice_layout.model.layout_config import LayoutConfig
from invoice_layout.utils.logger import get_logger

LOGGER = get_logger(__name__)

_BANK_META_KEYS = {"field_labels", "header_in_invoice", "header"}


@dataclass(slots=True)
class InvoiceRequest:
    """Everything ``generate`` needs for one invoice."""

    parties: InvoiceParties
    bill_lines: List[BillLine]
    bank_accounts: List[BankAccount]
    config: LayoutConfig


class PayloadParser:
    """Translate a snake_case payload mapping into model objects."""

    def __init__(self, payload: Mapping[str, Any]) -> None:
        if not isinstance(payload, Mapping):
            raise ValidationError("Invoice payload must be a JSON object")
        self._payload = payload

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PayloadParser":
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invoice payload {path} is not valid JSON: {exc}") from exc
        LOGGER.debug("Loaded invoice payload from %s", path)
        return cls(payload)

    def parse(self) -> InvoiceRequest:
        vendor = self._section("vendor")
        customer = self._section("customer")
        invoice = self._payload.get("invoice") or {}

        parties = InvoiceParties(
            issuer=self._contact(vendor, name_key="company_name"),
            recipient=self._contact(customer, name_key="client_name"),
            invoice_number=str(invoice.get("invoice_number") or customer.get("invoice_number") or ""),
            currency=str(invoice.get("currency") or customer.get("currency") or "$"),
            issued_on=self._parse_date(invoice.get("issued_on")),
            discount_rate=self._number(invoice.get("discount_rate", 0), "discount_rate"),
            tax_rate=self._number(invoice.get("tax_rate", 0), "tax_rate"),
        )
        bill_lines = [self._bill_line(index, raw) for index, raw in enumerate(self._payload.get("bill") or [])]
        bank_accounts = [self._bank_account(raw) for raw in self._payload.get("bank_accounts") or []]
        config = LayoutConfig().with_overrides(**dict(self._payload.get("config") or {}))
        return InvoiceRequest(parties=parties, bill_lines=bill_lines, bank_accounts=bank_accounts, config=config)

    # ------------------------------------------------------------------
    # Helpers
    def _section(self, key: str) -> Mapping[str, Any]:
        section = self._payload.get(key)
        if not isinstance(section, Mapping):
            raise ValidationError(f"Invoice payload is missing the '{key}' object")
        return section

    def _contact(self, data: Mapping[str, Any], name_key: str) -> PartyContact:
        return PartyContact.from_fields(
            company_name=data.get(name_key) or data.get("company_name"),
            contact_person=data.get("contact_person"),
            address=data.get("address"),
            contact_number=data.get("contact_number"),
            email=data.get("email"),
        )

    def _bill_line(self, index: int, raw: Any) -> BillLine:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Bill line {index + 1} must be an object")
        return BillLine(
            date=self._parse_date(raw.get("date")) or raw.get("date") or "",
            description=str(raw.get("job_name") or raw.get("description") or ""),
            quantity=self._number(raw.get("quantity", 0), f"bill[{index}].quantity"),
            unit_price=self._number(raw.get("unit_price", 0), f"bill[{index}].unit_price"),
        )

    def _bank_account(self, raw: Any) -> BankAccount:
        if not isinstance(raw, Mapping):
            raise ValidationError("Bank account entries must be objects")
        labels = raw.get("field_labels") or []
        if not isinstance(labels, list):
            raise ValidationError("Bank account 'field_labels' must be a list")
        values = {key: value for key, value in raw.items() if key not in _BANK_META_KEYS}
        return BankAccount(
            field_labels=tuple(str(label) for label in labels),
            values=values,
            header=raw.get("header_in_invoice") or raw.get("header"),
        )

    @staticmethod
    def _number(value: Any, name: str) -> float:
        if value is None or value == "":
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"'{name}' must be numeric, got {value!r}") from exc

    @staticmethod
    def _parse_date(value: Any) -> Optional[datetime.date]:
        if isinstance(value, datetime.date):
            return value
        if not isinstance(value, str) or not value:
            return None
        try:
            return datetime.date.fromisoformat(value[:10])
        except ValueError:
            return None


def parse_payload(payload: Mapping[str, Any]) -> InvoiceRequest:
    """Convenience wrapper around :class:`PayloadParser`."""
    return PayloadParser(payload).parse()
