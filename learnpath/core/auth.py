"""Authentication utilities.

Identity is delegated to the client's identity provider: the browser sends the
provider's user id in the ``x-user-id`` header. There is no token
verification here; the header is trusted as-is.
"""

from fastapi import HTTPException, Request, status

USER_ID_HEADER = "x-user-id"


def get_auth_user(request: Request) -> str:
    """Get the current user ID for HTTP requests.

    Args:
        request: HTTP request object (injected by FastAPI)

    Returns:
        User ID from the ``x-user-id`` header

    Raises:
        HTTPException: 401 when the header is missing or blank
    """
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user_id

