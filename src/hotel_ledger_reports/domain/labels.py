"""Localized titles for report columns, summaries and headers."""

from hotel_ledger_reports.domain.reports import Column, ReportVariant

SUPPORTED_LANGUAGES = ("ar", "en")

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "#": "#",
        "date": "Date",
        "type": "Voucher",
        "number": "Transaction No.",
        "description": "Description",
        "debit": "Debit",
        "credit": "Credit",
        "balance": "Balance",
        "payment_method": "Payment Method",
        "contract_number": "Contract No.",
        "guest_name": "Guest",
        "national_id": "National ID",
        "mobile": "Mobile",
        "check_in": "Check-in",
        "check_out": "Check-out",
        "unit_number": "Unit",
        "contract_date": "Contract Date",
        "booking_number": "Booking No.",
        "guest": "Guest",
        "apartment": "Unit",
        "check_in_date": "Check-in",
        "check_out_date": "Check-out",
        "status": "Status",
        "price": "Price",
        "tax": "Tax",
        "total": "Total",
        "total_debit": "Total Debit",
        "total_credit": "Total Credit",
        "net_balance": "Net Balance",
        "start_date": "Start Date",
        "end_date": "End Date",
        "account": "Account",
        "currency": "Currency",
        "generated_at": "Generated",
        "no_rows": "No records found",
        "title.account_statement": "Account Statement",
        "title.fund_movement": "Fund Movement",
        "title.balady": "Balady Report",
        "title.daily_bookings": "Daily Booking Movements",
    },
    "ar": {
        "#": "#",
        "date": "التاريخ",
        "type": "نوع السند",
        "number": "رقم العملية",
        "description": "البيان",
        "debit": "مدين",
        "credit": "دائن",
        "balance": "الرصيد",
        "payment_method": "طريقة الدفع",
        "contract_number": "رقم العقد",
        "guest_name": "اسم النزيل",
        "national_id": "رقم الهوية",
        "mobile": "الجوال",
        "check_in": "تاريخ الدخول",
        "check_out": "تاريخ الخروج",
        "unit_number": "رقم الوحدة",
        "contract_date": "تاريخ العقد",
        "booking_number": "رقم الحجز",
        "guest": "النزيل",
        "apartment": "الوحدة",
        "check_in_date": "تاريخ الدخول",
        "check_out_date": "تاريخ الخروج",
        "status": "الحالة",
        "price": "السعر",
        "tax": "الضريبة",
        "total": "الإجمالي",
        "total_debit": "إجمالي المدين",
        "total_credit": "إجمالي الدائن",
        "net_balance": "صافي الرصيد",
        "start_date": "من تاريخ",
        "end_date": "إلى تاريخ",
        "account": "الحساب",
        "currency": "العملة",
        "generated_at": "تاريخ الإصدار",
        "no_rows": "لا توجد سجلات",
        "title.account_statement": "كشف حساب",
        "title.fund_movement": "حركة الصندوق",
        "title.balady": "تقرير بلدي",
        "title.daily_bookings": "حركة الحجوزات اليومية",
    },
}

_NUMERIC_KEYS = {"debit", "credit", "balance", "price", "tax", "total"}

_DEFAULT_COLUMN_KEYS: dict[ReportVariant, tuple[str, ...]] = {
    ReportVariant.ACCOUNT_STATEMENT: (
        "#",
        "date",
        "type",
        "number",
        "description",
        "debit",
        "credit",
        "balance",
        "payment_method",
    ),
    ReportVariant.BALADY: (
        "contract_number",
        "guest_name",
        "national_id",
        "mobile",
        "check_in",
        "check_out",
        "unit_number",
        "contract_date",
    ),
    ReportVariant.DAILY_BOOKINGS: (
        "booking_number",
        "guest",
        "apartment",
        "check_in_date",
        "check_out_date",
        "status",
        "price",
        "tax",
        "total",
        "balance",
    ),
}
_DEFAULT_COLUMN_KEYS[ReportVariant.FUND_MOVEMENT] = _DEFAULT_COLUMN_KEYS[
    ReportVariant.ACCOUNT_STATEMENT
]


def label(key: str, language: str) -> str:
    """Translate a label key, falling back to English and then the key itself."""
    table = LABELS.get(language, LABELS["en"])
    return table.get(key) or LABELS["en"].get(key, key)


def report_title(variant: ReportVariant, language: str) -> str:
    return label(f"title.{variant.value}", language)


def default_columns(variant: ReportVariant, language: str) -> list[Column]:
    return [
        Column(key=key, title=label(key, language), numeric=key in _NUMERIC_KEYS)
        for key in _DEFAULT_COLUMN_KEYS[variant]
    ]
