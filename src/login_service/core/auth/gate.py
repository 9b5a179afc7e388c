"""Request authentication and ownership authorization."""

from uuid import UUID

from login_service.core.auth.schemas import Identity
from login_service.core.auth.tokens import TokenService
from login_service.core.constants import BEARER_SCHEME
from login_service.core.errors import ForbiddenError, InvalidTokenError, UnauthorizedError


def split_bearer(header: str | None) -> str:
    """Extract the token from a bearer Authorization header.

    Args:
        header: Raw Authorization header value

    Returns:
        The presented token

    Raises:
        UnauthorizedError: If the header is missing or not a bearer credential
    """
    if not header:
        raise UnauthorizedError("Missing authentication token")

    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme != BEARER_SCHEME or not token or " " in token:
        raise UnauthorizedError("Invalid authorization header")
    return token


class AuthorizationGate:
    """Turns a bearer header into an identity and checks resource ownership.

    Authentication always comes first: ``authorize_owner`` only accepts an
    ``Identity``, which only ``authenticate`` produces.
    """

    def __init__(self, tokens: TokenService) -> None:
        self.tokens = tokens

    def authenticate(self, header: str | None) -> Identity:
        """Authenticate a request from its Authorization header.

        Args:
            header: Raw Authorization header value

        Returns:
            The caller's identity

        Raises:
            UnauthorizedError: If the header is missing, uses another scheme,
                or carries an invalid access token
        """
        token = split_bearer(header)
        try:
            claims = self.tokens.verify_access_token(token)
        except InvalidTokenError as e:
            raise UnauthorizedError("Invalid or expired token") from e
        return Identity(sub=claims.sub, username=claims.username)

    @staticmethod
    def authorize_owner(identity: Identity | None, resource_id: UUID | str) -> None:
        """Allow access only to the caller's own resource.

        Args:
            identity: The authenticated caller
            resource_id: Identifier of the requested account

        Raises:
            UnauthorizedError: If there is no authenticated caller
            ForbiddenError: If the caller does not own the resource
        """
        if identity is None:
            raise UnauthorizedError()
        if identity.sub != str(resource_id):
            raise ForbiddenError()
