"""Small helpers shared by the API tests."""

from typing import Dict

from httpx import AsyncClient

DEFAULT_PASSWORD = "secret123"


async def signup_user(
    client: AsyncClient,
    email: str = "alex@fitsphere.io",
    password: str = DEFAULT_PASSWORD,
    name: str = "Alex",
    **profile,
) -> Dict:
    """Register through the API and return the response body."""
    payload = {"name": name, "email": email, "password": password, **profile}
    response = await client.post("/api/auth/signup", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
