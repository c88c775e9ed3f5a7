from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AsylumError(Exception):
    """Erreur de base : porte le statut HTTP et le message public."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ProviderUnconfigured(AsylumError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Discord login not configured. Please add DISCORD_CLIENT_ID and DISCORD_CLIENT_SECRET."


class ProviderHandshakeFailed(AsylumError):
    # Jamais rendue : le callback la transforme en redirection
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Discord handshake failed"


class InvalidOrExpiredToken(AsylumError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"


class Unauthorized(AsylumError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class Forbidden(AsylumError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class BadRequest(AsylumError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class NotFound(AsylumError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


async def asylum_error_handler(request: Request, exc: AsylumError) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    content = {"message": "Invalid input"}
    errors = exc.errors()
    if errors:
        # ("body", "field") -> "field"
        loc = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            content["field"] = ".".join(loc)
    return JSONResponse(content, status_code=status.HTTP_400_BAD_REQUEST)
