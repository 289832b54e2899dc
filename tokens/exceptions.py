from rest_framework import status
from rest_framework.exceptions import APIException


class QueueError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Queue operation failed."
    default_code = "queue_error"


class TokenNotFound(QueueError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Token not found"
    default_code = "token_not_found"


class TableNotFound(QueueError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Tables not found"
    default_code = "table_not_found"


class InvalidTokenState(QueueError):
    default_detail = "Token cannot be changed in its current status"
    default_code = "invalid_token_state"


class InvalidTokenData(QueueError):
    default_detail = "Invalid token data"
    default_code = "invalid_token_data"


class DuplicateTokenNumber(QueueError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Token number already issued, retry the request"
    default_code = "duplicate_token_number"


class TableUnavailable(QueueError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Table is held by another token"
    default_code = "table_unavailable"
