from dataclasses import dataclass
from typing import Optional, Sequence

from app.schemas.enums import UserRole


# ==================== ROLE GROUPS ====================

ROLES_ADMIN_STAFF = (UserRole.ADMIN, UserRole.STAFF)
ROLES_ADMIN = (UserRole.ADMIN,)
ROLES_MEMBER = (UserRole.MEMBER,)
ROLES_TRAINER = (UserRole.TRAINER,)
ROLES_BACK_OFFICE = (UserRole.SYSTEM_ADMIN, UserRole.ADMIN, UserRole.STAFF)

LOGIN_PATH = "/auth"
MEMBER_PORTAL_PATH = "/member-portal"
TRAINER_PORTAL_PATH = "/trainer-portal"
DASHBOARD_PATH = "/"

ACCESS_DENIED_TITLE = "Access Denied"
ACCESS_DENIED_MESSAGE = "You don't have permission to access this page."


# ==================== SIDEBAR ====================

MENU_GROUPS = [
    {
        "label": "Main Menu",
        "items": [
            {"title": "Dashboard", "url": "/", "icon": "home"},
            {"title": "Members", "url": "/members", "icon": "users"},
            {"title": "Packages", "url": "/packages", "icon": "package"},
            {"title": "Subscriptions", "url": "/subscriptions", "icon": "credit-card"},
            {"title": "Trainers", "url": "/trainers", "icon": "dumbbell"},
            {"title": "Attendance", "url": "/attendance", "icon": "calendar"},
            {"title": "Invoices", "url": "/invoices", "icon": "file-text"},
            {"title": "Staff", "url": "/staff", "icon": "user-cog", "roles": ROLES_ADMIN},
            {"title": "Gym Settings", "url": "/gym-settings", "icon": "settings", "roles": ROLES_ADMIN},
        ],
    },
    {
        "label": "Accounts & Finance",
        "items": [
            {"title": "Accounts", "url": "/accounts", "icon": "wallet"},
            {"title": "Expenses", "url": "/expenses", "icon": "receipt"},
            {"title": "Account Ledger", "url": "/account-ledger", "icon": "book-open"},
        ],
    },
    {
        "label": "Analytics",
        "items": [
            {"title": "Reports Dashboard", "url": "/reports", "icon": "bar-chart"},
            {"title": "Account Summary", "url": "/reports/account-summary", "icon": "pie-chart"},
            {"title": "Expense Report", "url": "/reports/expenses", "icon": "trending-down"},
            {"title": "Income vs Expense", "url": "/reports/income-expense", "icon": "trending-up"},
        ],
    },
]


def is_menu_item_active(item_url: str, current_path: str) -> bool:
    if item_url == "/":
        return current_path == "/"
    return current_path.startswith(item_url)


def build_menu(auth, current_path: str) -> list[dict]:
    """
    Sidebar groups visible to the signed-in user.

    Nothing is shown unless the user has Admin or Staff; empty groups are
    dropped.
    """
    if auth is None or not auth.has_role(ROLES_ADMIN_STAFF):
        return []

    groups = []
    for group in MENU_GROUPS:
        items = []
        for item in group["items"]:
            if not auth.has_role(item.get("roles", ROLES_ADMIN_STAFF)):
                continue
            items.append({**item, "active": is_menu_item_active(item["url"], current_path)})
        if items:
            groups.append({"label": group["label"], "items": items})
    return groups


# ==================== ACCESS DECISIONS ====================

@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect: Optional[str] = None

    @property
    def denied(self) -> bool:
        return not self.allowed and self.redirect is None


ALLOW = AccessDecision(allowed=True)
DENY = AccessDecision(allowed=False)


def _redirect(path: str) -> AccessDecision:
    return AccessDecision(allowed=False, redirect=path)


def resolve_access(path: str, auth, required_roles: Optional[Sequence[UserRole]] = None) -> AccessDecision:
    """
    Decide whether the current user may open ``path``.

    Rules are applied in order: anonymous users go to the login page,
    members and trainers are bounced to their portals, back-office users
    without the required role get an access-denied page.
    """
    if auth is None:
        return _redirect(LOGIN_PATH)

    back_office = auth.has_role(ROLES_BACK_OFFICE)

    if path == DASHBOARD_PATH:
        if auth.is_member:
            return _redirect(MEMBER_PORTAL_PATH)
        if auth.is_trainer and not back_office:
            return _redirect(TRAINER_PORTAL_PATH)

    if required_roles:
        if auth.is_member and UserRole.MEMBER not in required_roles:
            return _redirect(MEMBER_PORTAL_PATH)

        if auth.is_trainer and UserRole.TRAINER not in required_roles:
            return _redirect(TRAINER_PORTAL_PATH)

        if not auth.has_role(required_roles):
            if auth.is_admin:
                return ALLOW
            if UserRole.ADMIN in required_roles and auth.is_system_admin:
                return ALLOW
            if back_office:
                return DENY

    return ALLOW


def landing_path_for(roles: Sequence[str]) -> Optional[str]:
    """Page a user lands on after signing in, or None when no known role is present"""
    if any(role in roles for role in (r.claim for r in ROLES_BACK_OFFICE)):
        return DASHBOARD_PATH
    if UserRole.MEMBER.claim in roles:
        return MEMBER_PORTAL_PATH
    if UserRole.TRAINER.claim in roles:
        return TRAINER_PORTAL_PATH
    return None


def role_label(auth) -> str:
    if auth is None:
        return "User"
    if auth.is_system_admin:
        return "System Admin"
    if auth.is_admin:
        return "Gym Admin"
    if auth.is_staff:
        return "Staff"
    return "User"
