import pytest_asyncio

SIGNIN_URL = "/api/v1/auth/signin"


@pytest_asyncio.fixture
async def signed_in(async_client, create_user):
    """Sign in the default user and return the response body."""
    await create_user()
    response = await async_client.post(
        SIGNIN_URL,
        json={"email": "jane@example.com", "password": "Str0ngP@ssw0rd"},
        headers={"User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0)"},
    )
    assert response.status_code == 201
    return response.json()
