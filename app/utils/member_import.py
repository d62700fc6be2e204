"""
Bulk member import from an Excel workbook.

The first sheet must have a header row using the column names below. Rows
are validated locally; valid rows are then created one by one through the
members API and failures are reported per row.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from io import BytesIO
from typing import Any, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.datetime import from_excel

from app.core.http import ApiError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["email", "password", "memberCode", "firstName", "lastName", "phoneNo", "gender"]
ALL_COLUMNS = [
    "email", "password", "memberCode", "firstName", "lastName", "phoneNo",
    "cnic", "dateOfBirth", "gender", "address", "emergencyContact", "emergencyPhone", "photoUrl", "notes",
]
OPTIONAL_TEXT_COLUMNS = ["cnic", "address", "emergencyContact", "emergencyPhone", "photoUrl", "notes"]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DMY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
YMD_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

GENDERS = {"male": "Male", "m": "Male", "female": "Female", "f": "Female", "other": "Other", "o": "Other"}
VALID_GENDERS = ("Male", "Female", "Other")

TEMPLATE_FILENAME = "member_import_template.xlsx"
TEMPLATE_ROW = {
    "email": "john@example.com",
    "password": "password123",
    "memberCode": "MEM001",
    "firstName": "John",
    "lastName": "Doe",
    "phoneNo": "+1234567890",
    "cnic": "12345-1234567-1",
    "dateOfBirth": "15/01/1990",
    "gender": "Male",
    "address": "123 Main Street",
    "emergencyContact": "Jane Doe",
    "emergencyPhone": "+0987654321",
    "notes": "Sample member",
}


class MemberImportError(Exception):
    """Raised when the workbook itself cannot be used"""
    pass


@dataclass
class ParsedRow:
    row_index: int
    data: dict
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class ImportResult:
    rows: list[ParsedRow]
    success_count: int = 0
    failed_count: int = 0

    @property
    def valid_rows(self) -> list[ParsedRow]:
        return [row for row in self.rows if row.is_valid]

    @property
    def invalid_rows(self) -> list[ParsedRow]:
        return [row for row in self.rows if not row.is_valid]

    @property
    def summary(self) -> str:
        return f"Parsed {len(self.rows)} rows: {len(self.valid_rows)} valid, {len(self.invalid_rows)} with errors"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_date(value: Any) -> Optional[str]:
    """Excel serial, dd/MM/yyyy or yyyy-MM-dd to ISO yyyy-MM-dd; other text is passed through"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return from_excel(value).date().isoformat()

    text = str(value).strip()
    match = DMY_PATTERN.match(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    if YMD_PATTERN.match(text):
        return text
    return text


def parse_gender(value: Any) -> str:
    text = _text(value)
    if not text:
        return ""
    return GENDERS.get(text.lower(), text)


def validate_row(row: dict, row_index: int, gym_id) -> ParsedRow:
    errors = []

    for column in REQUIRED_COLUMNS:
        if not _text(row.get(column)):
            errors.append(f"Missing required field: {column}")

    email = _text(row.get("email"))
    if email and not EMAIL_PATTERN.match(email):
        errors.append("Invalid email format")

    gender = parse_gender(row.get("gender"))
    if gender and gender not in VALID_GENDERS:
        errors.append("Gender must be Male, Female, or Other")

    password = _text(row.get("password"))
    if password and len(password) < 6:
        errors.append("Password must be at least 6 characters")

    data = {
        "gymId": gym_id or 0,
        "email": email,
        "password": password,
        "memberCode": _text(row.get("memberCode")),
        "firstName": _text(row.get("firstName")),
        "lastName": _text(row.get("lastName")),
        "phoneNo": _text(row.get("phoneNo")),
        "dateOfBirth": parse_date(row.get("dateOfBirth")),
        "gender": gender,
    }
    for column in OPTIONAL_TEXT_COLUMNS:
        data[column] = _text(row.get(column)) or None

    return ParsedRow(row_index=row_index, data=data, errors=errors)


def parse_workbook(content: bytes, gym_id) -> ImportResult:
    """
    Read and validate every data row of the first sheet.

    Raises:
        MemberImportError: If the file is unreadable, empty or misses required columns
    """
    try:
        workbook = load_workbook(BytesIO(content), data_only=True)
    except Exception as e:
        logger.warning(f"Unreadable member import file: {e}")
        raise MemberImportError("Failed to parse Excel file. Please check the format.") from e

    sheet = workbook.worksheets[0]
    rows = list(sheet.iter_rows(values_only=True))
    if not rows:
        raise MemberImportError("The Excel file is empty")

    headers = [_text(cell) for cell in rows[0]]
    data_rows = [row for row in rows[1:] if any(_text(cell) for cell in row)]
    if not data_rows:
        raise MemberImportError("The Excel file is empty")

    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise MemberImportError(f"Missing required columns: {', '.join(missing)}")

    parsed = []
    for index, row in enumerate(data_rows):
        record = {header: value for header, value in zip(headers, row) if header}
        # +2: one for the header row, one for 1-based numbering
        parsed.append(validate_row(record, index + 2, gym_id))

    return ImportResult(rows=parsed)


async def import_members(result: ImportResult, member_service) -> ImportResult:
    """Create the valid rows sequentially; failures are appended to the row's errors"""
    for row in result.valid_rows:
        try:
            await member_service.create_member(row.data)
            result.success_count += 1
        except ApiError as e:
            if e.is_unauthorized:
                raise
            logger.warning(f"Member import row {row.row_index} failed: {e.message}")
            result.failed_count += 1
            row.errors.append(f"Import error: {e.message or 'Import failed'}")
    return result


def build_template() -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Members"

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True, size=11)

    for col_num, column in enumerate(ALL_COLUMNS, 1):
        cell = ws.cell(row=1, column=col_num, value=column)
        cell.fill = header_fill
        cell.font = header_font
        ws.cell(row=2, column=col_num, value=TEMPLATE_ROW.get(column))
        ws.column_dimensions[get_column_letter(col_num)].width = 18

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
