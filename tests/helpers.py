"""Helpers shared by the API tests."""
from issuetrack.api.auth import create_access_token
from issuetrack.models.user import User

API = "/api"


def auth_headers(user: User) -> dict:
    """Bearer headers for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}
