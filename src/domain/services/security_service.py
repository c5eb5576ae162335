"""Request-scoped security context."""

from domain.entities.user import User


class SecurityService:
    """Exposes the authenticated user and the organization it belongs to.

    One instance is built per request from the validated token, so nothing
    here is shared between concurrent requests.
    """

    def __init__(self, user: User) -> None:
        self._user = user

    @property
    def user(self) -> User:
        """The user issuing the current request."""
        return self._user

    @property
    def organization(self) -> str:
        """Organization that scopes every read and write of the request."""
        return self._user.organization
