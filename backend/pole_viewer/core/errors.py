from fastapi import status


class PoleQueryError(Exception):
    """Base of every failure the pole endpoints map to an HTTP error."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = 'internal error'

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail


class InvalidBoundsError(PoleQueryError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = 'invalid bounds'


class InvalidPaginationError(PoleQueryError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = 'invalid pagination'


class AreaTooLargeError(PoleQueryError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = 'area too large'


class QueryTimeoutError(PoleQueryError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    public_message = 'query timed out'


class QueryFailedError(PoleQueryError):
    pass
