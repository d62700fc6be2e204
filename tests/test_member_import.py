import asyncio
from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from app.core.http import ApiError
from app.utils.member_import import (
    ALL_COLUMNS,
    MemberImportError,
    build_template,
    import_members,
    parse_date,
    parse_gender,
    parse_workbook,
)


def _workbook(headers, *rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    output = BytesIO()
    wb.save(output)
    return output.getvalue()


HEADERS = ["email", "password", "memberCode", "firstName", "lastName", "phoneNo", "gender", "dateOfBirth", "cnic"]
GOOD_ROW = ["ali@example.com", "secret1", "MEM001", "Ali", "Khan", 3001234567, "m", "15/01/1990", ""]


def test_template_has_all_columns():
    sheet = load_workbook(BytesIO(build_template())).active
    assert [c.value for c in sheet[1]] == ALL_COLUMNS
    assert sheet["A2"].value == "john@example.com"


def test_parse_date_formats():
    assert parse_date("15/01/1990") == "1990-01-15"
    assert parse_date("1990-1-5") == "1990-1-5"
    assert parse_date(datetime(1990, 1, 15)) == "1990-01-15"
    assert parse_date(32888) == "1990-01-15"
    assert parse_date("") is None


def test_parse_gender_aliases():
    assert parse_gender("F") == "Female"
    assert parse_gender(" male ") == "Male"
    assert parse_gender("x") == "x"


def test_valid_row_payload():
    result = parse_workbook(_workbook(HEADERS, GOOD_ROW), gym_id=7)

    assert len(result.valid_rows) == 1
    data = result.valid_rows[0].data
    assert data["gymId"] == 7
    assert data["phoneNo"] == "3001234567"
    assert data["gender"] == "Male"
    assert data["dateOfBirth"] == "1990-01-15"
    assert data["cnic"] is None


def test_row_errors_are_collected():
    bad = ["not-an-email", "123", "", "Ali", "Khan", "0300", "robot", None, None]
    result = parse_workbook(_workbook(HEADERS, GOOD_ROW, bad), gym_id=7)

    row = result.invalid_rows[0]
    assert row.row_index == 3
    assert "Missing required field: memberCode" in row.errors
    assert "Invalid email format" in row.errors
    assert "Gender must be Male, Female, or Other" in row.errors
    assert "Password must be at least 6 characters" in row.errors
    assert result.summary == "Parsed 2 rows: 1 valid, 1 with errors"


def test_missing_columns_reject_the_file():
    with pytest.raises(MemberImportError, match="Missing required columns: gender"):
        parse_workbook(_workbook(HEADERS[:6], GOOD_ROW[:6]), gym_id=7)


def test_empty_and_unreadable_files():
    with pytest.raises(MemberImportError, match="empty"):
        parse_workbook(_workbook(HEADERS), gym_id=7)
    with pytest.raises(MemberImportError, match="Failed to parse Excel file"):
        parse_workbook(b"not a workbook", gym_id=7)


class FakeMembers:
    def __init__(self, fail_codes=()):
        self.fail_codes = set(fail_codes)
        self.created = []

    async def create_member(self, payload):
        if payload["memberCode"] in self.fail_codes:
            raise ApiError(409, "Email already exists")
        self.created.append(payload)
        return payload


def test_import_counts_successes_and_failures():
    second = ["zara@example.com", "secret1", "MEM002", "Zara", "Noor", "0301", "Female", None, None]
    result = parse_workbook(_workbook(HEADERS, GOOD_ROW, second), gym_id=7)
    members = FakeMembers(fail_codes={"MEM002"})

    asyncio.run(import_members(result, members))

    assert result.success_count == 1
    assert result.failed_count == 1
    assert [m["memberCode"] for m in members.created] == ["MEM001"]
    assert result.rows[1].errors == ["Import error: Email already exists"]


def test_import_stops_on_expired_session():
    result = parse_workbook(_workbook(HEADERS, GOOD_ROW), gym_id=7)

    class Expired:
        async def create_member(self, payload):
            raise ApiError(401, "Unauthorized")

    with pytest.raises(ApiError):
        asyncio.run(import_members(result, Expired()))
