from datetime import date

from factories import make_token


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_anonymous_user_is_sent_to_login(client):
    response = client.get("/members", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth"


def test_login_page_renders_tabs(client):
    response = client.get("/auth?tab=signup")
    assert response.status_code == 200
    assert "Sign Up" in response.text


def test_admin_lands_on_dashboard(client, sign_in, backend):
    response = sign_in("Admin")
    assert response.headers["location"] == "/"

    page = client.get("/")
    assert page.status_code == 200
    assert "Welcome back!" in page.text
    assert "Sara Malik" in page.text
    assert backend.calls("GET", "/members/gym/7")
    today = date.today()
    assert backend.calls("GET", f"/transactions/getTotalRevenue/7/{today.month}/{today.year}")


def test_login_sends_credentials(client, sign_in, backend):
    sign_in("Staff")
    assert backend.last_json("POST", "/auth/login") == {"email": "owner@example.com", "password": "secret123"}


def test_member_lands_on_portal(client, sign_in):
    assert sign_in("Member").headers["location"] == "/member-portal"

    response = client.get("/", follow_redirects=False)
    assert response.headers["location"] == "/member-portal"


def test_trainer_lands_on_portal(client, sign_in):
    assert sign_in("Trainer").headers["location"] == "/trainer-portal"


def test_signed_in_user_skips_login_page(client, sign_in):
    sign_in("Admin")
    response = client.get("/auth", follow_redirects=False)
    assert response.headers["location"] == "/"


def test_login_without_known_role(client, backend):
    backend.on("POST", "/auth/login", {
        "token": make_token("Guest"),
        "user": {"id": 1, "email": "guest@example.com"},
    })
    response = client.post("/auth/login", data={"email": "guest@example.com", "password": "secret123"})
    assert response.url.path == "/auth"
    assert "No valid roles assigned" in response.text

    assert client.get("/members", follow_redirects=False).headers["location"] == "/auth"


def test_invalid_login_message(client, backend):
    backend.on("POST", "/auth/login", {"message": "Invalid login credentials"}, status_code=400)
    response = client.post("/auth/login", data={"email": "a@example.com", "password": "wrong-pass"})
    assert "Invalid email or password" in response.text


def test_other_login_failures_show_backend_message(client, backend):
    backend.on("POST", "/auth/login", {"message": "Account is blocked"}, status_code=403)
    response = client.post("/auth/login", data={"email": "a@example.com", "password": "whatever"})
    assert "Account is blocked" in response.text


def test_login_form_validation(client, backend):
    response = client.post("/auth/login", data={"email": "a@example.com", "password": ""})
    assert "Password is required" in response.text
    assert not backend.calls("POST", "/auth/login")


def test_signup(client, backend):
    response = client.post("/auth/signup", data={
        "email": "new@example.com", "password": "secret1", "first_name": "Nida", "last_name": "Aziz",
        "timezone": "Asia/Karachi", "gym_name": "Iron Den",
    })
    assert "Account created! Please verify your email." in response.text
    body = backend.last_json("POST", "/auth/signup")
    assert body["firstName"] == "Nida"
    assert body["gymName"] == "Iron Den"


def test_logout_clears_session(client, sign_in, backend):
    sign_in("Admin")
    response = client.post("/auth/logout")
    assert "Signed out successfully" in response.text
    assert backend.calls("POST", "/auth/logout")
    assert client.get("/", follow_redirects=False).headers["location"] == "/auth"


def test_logout_survives_backend_failure(client, sign_in, backend):
    sign_in("Admin")
    backend.on("POST", "/auth/logout", {"message": "boom"}, status_code=500)
    response = client.post("/auth/logout")
    assert "Signed out successfully" in response.text


def test_update_password(client, sign_in, backend):
    sign_in("Staff")
    assert client.get("/auth/password").status_code == 200

    response = client.post("/auth/password", data={"old_password": "secret123", "new_password": "newsecret"})
    assert "Password updated successfully" in response.text
    assert backend.last_json("POST", "/auth/update-password") == {
        "oldPassword": "secret123",
        "newPassword": "newsecret",
    }


def test_staff_cannot_open_admin_pages(client, sign_in):
    sign_in("Staff")
    response = client.get("/staff")
    assert response.status_code == 403
    assert "Access Denied" in response.text


def test_member_is_bounced_from_back_office(client, sign_in):
    sign_in("Member")
    response = client.get("/invoices", follow_redirects=False)
    assert response.headers["location"] == "/member-portal"


def test_unknown_page(client, sign_in):
    sign_in("Admin")
    response = client.get("/no-such-page")
    assert response.status_code == 404
    assert "Page Not Found" in response.text


def test_expired_backend_session_signs_user_out(client, sign_in, backend):
    sign_in("Admin")
    backend.on("GET", "/members/gym/7", {"message": "Unauthorized"}, status_code=401)

    response = client.get("/members")

    assert response.url.path == "/auth"
    assert "Your session has expired" in response.text
    assert client.get("/", follow_redirects=False).headers["location"] == "/auth"


def test_backend_error_page(client, sign_in, backend):
    sign_in("Admin")
    backend.on("GET", "/members/gym/7", {"message": "Database unavailable"}, status_code=500)

    response = client.get("/members")

    assert response.status_code == 502
    assert "Database unavailable" in response.text
