class ServiceError(ValueError):
    """Base for errors a route turns into an HTTP response.

    `title` is the short heading the mobile client shows in its alert,
    str(error) is the message body.
    """
    status_code = 400
    title = "Error"

    def __init__(self, message: str, title: str | None = None):
        super().__init__(message)
        if title is not None:
            self.title = title


class ValidationError(ServiceError):
    status_code = 400
    title = "Validation Error"


class NotFoundError(ServiceError):
    status_code = 404
    title = "Not Found"


class FavoritesConflictError(ServiceError):
    status_code = 409
    title = "Favorites Changed"


class BookingFailedError(ServiceError):
    status_code = 502
    title = "Booking Failed"
