from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from travelbill.domain.models.billing import BankDetails, BillingRecord
from travelbill.domain.models.duty import CompanySettings, Vehicle


def _has_bank_details(bank: BankDetails) -> bool:
    return any((bank.bank_name, bank.branch, bank.account_number, bank.ifsc_code))


@dataclass(frozen=True)
class DocumentContext:
    """Static identity printed around a ComputedInvoice. Carries no amounts."""
    company: CompanySettings
    invoice_number: str
    invoice_date: date
    recipient_name: str = ""
    recipient_address: str = ""
    project_location: str = ""
    working_time: str = ""
    period: str = ""
    place_of_supply: str = ""
    bank_details: BankDetails = field(default_factory=BankDetails)
    vehicles: tuple[Vehicle, ...] = ()

    @classmethod
    def from_record(
        cls,
        record: BillingRecord,
        company: CompanySettings,
        *,
        invoice_number: str,
        invoice_date: Optional[date] = None,
        vehicles: Iterable[Vehicle] = (),
    ) -> "DocumentContext":
        bank = record.bank_details if _has_bank_details(record.bank_details) else company.bank_details
        return cls(
            company=company,
            invoice_number=invoice_number,
            invoice_date=invoice_date or record.billing_date or date.today(),
            recipient_name=record.recipient_name,
            recipient_address=record.recipient_address,
            # The printed invoice falls back to the recipient address
            project_location=record.project_location or record.recipient_address,
            working_time=record.working_time,
            period=record.period,
            place_of_supply=record.place_of_supply,
            bank_details=bank,
            vehicles=tuple(vehicles),
        )

    @property
    def supplier_gstin(self) -> str:
        return self.company.gst_number.upper()

    @property
    def supplier_pan(self) -> str:
        return self.company.pan_number.upper()

    @property
    def invoice_date_text(self) -> str:
        return self.invoice_date.strftime("%d/%m/%Y")

    @property
    def vehicle_summary(self) -> str:
        return ", ".join(f"{v.vehicle_number} ({v.vehicle_type})" for v in self.vehicles)
