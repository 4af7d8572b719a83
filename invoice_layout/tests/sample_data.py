"""Invoice inputs shared by the layout tests."""
from __future__ import annotations

import datetime
from typing import List, Optional

from invoice_layout.model.invoice_model import BankAccount, BillLine, InvoiceParties, PartyContact

ISSUE_DATE = datetime.date(2026, 3, 5)


def make_parties(
    discount_rate: float = 0.0,
    tax_rate: float = 0.0,
    issuer_address: str = "1 Main St, Springfield",
) -> InvoiceParties:
    return InvoiceParties(
        issuer=PartyContact.from_fields(
            company_name="Acme Studio",
            contact_person="Jane Roe",
            address=issuer_address,
            contact_number="+1 555 0100",
            email="billing@acme.test",
        ),
        recipient=PartyContact.from_fields(
            company_name="Client Co",
            contact_person="John Doe",
            address="2 High St",
            contact_number="+44 20 0000",
            email="ap@client.test",
        ),
        invoice_number="INV-0042",
        currency="$",
        issued_on=ISSUE_DATE,
        discount_rate=discount_rate,
        tax_rate=tax_rate,
    )


def make_bill_lines(count: Optional[int] = None) -> List[BillLine]:
    if count is None:
        return [
            BillLine(datetime.date(2026, 3, 1), "Retouch", 2, 10),
            BillLine(datetime.date(2026, 3, 2), "Clipping", 1, 5),
            BillLine(datetime.date(2026, 3, 3), "Masking", 4, 2.5),
        ]
    return [BillLine(datetime.date(2026, 3, 1), f"Job {index + 1}", 1, 3) for index in range(count)]


def make_bank_accounts() -> List[BankAccount]:
    labels = ("Bank Name", "Account Number", "SWIFT Code")
    return [
        BankAccount(
            field_labels=labels,
            values={"bank_name": "First Bank", "account_number": "12345678", "swift_code": "FBKUS33"},
            header="USD Account",
        ),
        BankAccount(
            field_labels=labels,
            values={"bank_name": "Second Bank", "account_number": "87654321", "swift_code": "SBKGB22"},
            header="GBP Account",
        ),
    ]


PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x95\x00\x00\x00\x65\x08\x06\x00\x00\x00"


def sample_payload() -> dict:
    return {
        "vendor": {
            "company_name": "Acme Studio",
            "contact_person": "Jane Roe",
            "address": "1 Main St",
            "contact_number": "+1 555 0100",
            "email": "billing@acme.test",
        },
        "customer": {
            "client_name": "Client Co",
            "contact_person": "John Doe",
            "email": "ap@client.test",
            "currency": "€",
            "invoice_number": "INV-7",
        },
        "invoice": {"issued_on": "2026-03-05T10:00:00Z", "tax_rate": "0.05"},
        "bill": [
            {"date": "2026-03-01", "job_name": "Retouch", "quantity": 2, "unit_price": 10},
            {"date": "", "description": "Rush fee", "quantity": "1", "unit_price": 5.5},
        ],
        "bank_accounts": [
            {
                "field_labels": ["Bank Name", "Routing Number (ABA)"],
                "header_in_invoice": "USD Account",
                "bank_name": "First Bank",
                "routing_number_aba": "021000021",
            },
            {"field_labels": ["IBAN"], "iban": "GB33BUKB20201555555555"},
        ],
        "config": {"page_type": "a4", "candidate_gaps": [3, 1]},
    }
