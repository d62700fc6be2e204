from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from factories import member_json


@pytest.fixture
def admin(client, sign_in):
    sign_in("Admin")
    return client


def test_list_filters_by_search_text(admin, backend):
    backend.on("GET", "/members/gym/7", [
        member_json(1, "Ali", "Khan", "MEM001"),
        member_json(2, "Bilal", "Ahmed", "MEM002"),
        member_json(3, "Sana", "Iqbal", "MEM003"),
    ])

    response = admin.get("/members?searchText=bilal")
    assert "Bilal" in response.text
    assert "Sana" not in response.text


def test_new_member_form_prefills_code(admin, backend):
    backend.on("GET", "/members/generate-code/7", {"memberCode": "MEM042"})
    response = admin.get("/members/new")
    assert response.status_code == 200
    assert "MEM042" in response.text


def test_create_member_payload(admin, backend):
    backend.on("POST", "/members", member_json(5))

    response = admin.post("/members", data={
        "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1",
        "phone": "03001234567", "gender": "1", "status": "1", "member_code": "MEM005",
    })

    assert "Member added successfully!" in response.text
    body = backend.last_json("POST", "/members")
    assert body["phoneNo"] == "03001234567"
    assert "phone" not in body
    assert body["gymId"] == 7
    assert body["gender"] == 1
    assert body["memberCode"] == "MEM005"
    assert not backend.calls("PUT", "/members/5")


def test_create_member_with_photo_uploads_then_updates(admin, backend):
    backend.on("POST", "/members", member_json(5))
    backend.on("POST", "/members/upload-photo/5", {"photoUrl": "https://cdn/ali.png"})

    admin.post(
        "/members",
        data={
            "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1", "phone": "0300",
        },
        files={"photo": ("ali.png", b"\x89PNG", "image/png")},
    )

    body = backend.last_json("PUT", "/members/5")
    assert body["photoUrl"] == "https://cdn/ali.png"
    assert "password" not in body


def test_create_member_requires_email(admin, backend):
    response = admin.post("/members", data={"first_name": "Ali", "last_name": "Khan", "password": "secret1"})
    assert "Email is required to create user account" in response.text
    assert not backend.calls("POST", "/members")


def test_create_member_requires_phone(admin, backend):
    response = admin.post("/members", data={
        "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1",
    })
    assert "Phone is required" in response.text
    assert not backend.calls("POST", "/members")


def test_create_member_with_empty_response(admin, backend):
    response = admin.post(
        "/members",
        data={
            "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1", "phone": "0300",
        },
        files={"photo": ("ali.png", b"\x89PNG", "image/png")},
    )
    assert "Member added successfully!" in response.text
    assert not backend.calls("POST", "/members/upload-photo/5")
    assert not backend.calls("PUT", "/members/5")


def test_backend_error_is_shown(admin, backend):
    backend.on("POST", "/members", {"message": "Email already registered"}, status_code=400)
    response = admin.post("/members", data={
        "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1", "phone": "0300",
    })
    assert "Email already registered" in response.text


def test_detail_page(admin, backend):
    backend.on("GET", "/members/1/details", member_json(1, subscriptions=[]))
    response = admin.get("/members/1")
    assert response.status_code == 200
    assert "Ali" in response.text


def test_missing_member_is_404(admin):
    assert admin.get("/members/99").status_code == 404


def test_update_member(admin, backend):
    response = admin.post("/members/1", data={"first_name": "Ali", "last_name": "Raza", "status": "3"})
    assert "Member updated successfully" in response.text
    body = backend.last_json("PUT", "/members/1")
    assert body["lastName"] == "Raza"
    assert body["status"] == 3
    assert body["id"] == 1


def test_update_member_sends_account_contact_details(admin, backend):
    admin.post("/members/5", data={
        "first_name": "Ali", "last_name": "Khan", "phone_number": "03009998877", "email": "ali.khan@example.com",
    })
    body = backend.last_json("PUT", "/members/5")
    assert body["phoneNumber"] == "03009998877"
    assert body["email"] == "ali.khan@example.com"
    assert "phone" not in body


def test_edit_form_prefills_contact_from_user_account(admin, backend):
    backend.on("GET", "/members/5/details", member_json(
        5, email=None, phone=None, user={"id": "u-5", "email": "ali.khan@example.com", "phoneNumber": "03009998877"},
    ))
    response = admin.get("/members/5/edit")
    assert 'value="03009998877"' in response.text
    assert 'value="ali.khan@example.com"' in response.text


def test_delete_member(admin, backend):
    response = admin.post("/members/1/delete")
    assert "Member deleted successfully" in response.text
    assert backend.calls("DELETE", "/members/1")


def test_export_members_xlsx(admin, backend):
    backend.on("GET", "/members/gym/7", [member_json(1, gender=1, dateOfBirth="1990-01-15T00:00:00")])
    response = admin.get("/members/export")
    assert response.headers["content-disposition"].startswith("attachment; filename=members_")
    sheet = load_workbook(BytesIO(response.content)).active
    assert sheet["A2"].value == "MEM001"
    assert sheet["G2"].value == "1990-01-15"
    assert sheet["H2"].value == "Male"


def test_member_card(admin, backend):
    backend.on("GET", "/members/1/member-card", {
        "id": 1, "memberCode": "MEM001", "firstName": "Ali", "lastName": "Khan", "status": 1,
        "packageName": "Gold", "startDate": "2024-01-01", "endDate": "2024-01-31",
    })
    response = admin.get("/members/1/card")
    assert response.status_code == 200
    assert "MEM001" in response.text


# ==================== IMPORT ====================

def _upload(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(["email", "password", "memberCode", "firstName", "lastName", "phoneNo", "gender"])
    for row in rows:
        ws.append(row)
    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def test_import_template_download(admin):
    response = admin.get("/members/import/template")
    assert response.headers["content-disposition"] == "attachment; filename=member_import_template.xlsx"


def test_import_rejects_other_file_types(admin):
    response = admin.post("/members/import", files={"file": ("members.csv", b"a,b", "text/csv")})
    assert "Only Excel files (.xlsx, .xls) are allowed" in response.text


def test_import_creates_valid_rows(admin, backend):
    content = _upload([
        ["ali@example.com", "secret1", "MEM001", "Ali", "Khan", "0300", "Male"],
        ["broken", "1", "", "Zara", "Noor", "0301", "Female"],
    ])
    response = admin.post("/members/import", files={"file": ("members.xlsx", content, "application/octet-stream")})

    assert response.status_code == 200
    assert "Successfully imported 1 members" in response.text
    created = backend.calls("POST", "/members")
    assert len(created) == 1
    assert backend.last_json("POST", "/members")["gymId"] == 7
