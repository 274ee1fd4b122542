from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ImportStructureError(ServiceError):
    """Request or file shape is unusable; the whole import is rejected before any row is read."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class ImportCommitError(ServiceError):
    """A write failed during the commit pass."""

    def __init__(self, message: str, row_index: int) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.row_index = row_index
