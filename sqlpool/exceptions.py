from typing import Optional


class SqlPoolException(Exception):  # pragma: no cover
    """Custom exceptions for sqlpool."""


class SqlPoolConfigurationError(SqlPoolException):  # pragma: no cover
    """Something's wrong with the configuration of sqlpool."""


class SqlPoolValidationError(SqlPoolException):  # pragma: no cover
    """Parameters supplied by the user are invalid or don't fit together."""


class TagValidationError(SqlPoolValidationError):  # pragma: no cover
    """A resource tag name or value violates Azure's constraints."""


class ElasticPoolExistsError(SqlPoolException):
    """The elastic pool to be created exists already."""

    def __init__(self, elastic_pool_name: str, server_name: str):
        self.elastic_pool_name = elastic_pool_name
        self.server_name = server_name
        super().__init__(
            f"An elastic pool with name '{elastic_pool_name}' already exists in server"
            f" '{server_name}'."
        )


class SqlPoolAPIError(SqlPoolException):
    """The management API returned an error."""

    def __init__(self, status_code: Optional[int], code: Optional[str], detail: str):
        self.status_code = status_code
        self.code = code
        self.detail = detail
        super().__init__(detail)

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.detail}"
        return self.detail


class ResourceNotFoundError(SqlPoolAPIError):
    """The requested resource doesn't exist."""


class OperationFailedError(SqlPoolAPIError):
    """A long-running operation finished unsuccessfully."""


class InvalidResponseError(SqlPoolAPIError):
    """A successful response of the management API couldn't be understood."""
