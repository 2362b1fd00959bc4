"""
Client-side error taxonomy.

Every failed call raises a subclass of ``ApiError`` carrying the server's
``code``, ``message`` and HTTP ``status`` (0 when no usable response arrived).
"""


class ApiError(Exception):
    """Base class for all storefront API errors."""

    default_code = 'API_ERROR'
    default_message = 'Có lỗi xảy ra'

    def __init__(self, message=None, *, code=None, status=0, details=None):
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.status = status
        self.details = details
        super().__init__(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}(code={self.code!r}, status={self.status})"

    @property
    def retryable(self):
        return False


class ValidationError(ApiError):
    """Malformed input or a rule violation such as an empty rejection reason."""
    default_code = 'VALIDATION_ERROR'
    default_message = 'Dữ liệu không hợp lệ'


class NotFound(ApiError):
    """Order, package or user is missing or not owned by the caller."""
    default_code = 'NOT_FOUND'
    default_message = 'Không tìm thấy'


class InvalidState(ApiError):
    """The order is not in a status that allows the requested action."""
    default_code = 'INVALID_STATE'
    default_message = 'Trạng thái đơn hàng không hợp lệ'


class SessionInvalid(ApiError):
    """The session was superseded or expired (HTTP 401)."""
    default_code = 'SESSION_INVALID'
    default_message = 'Phiên đăng nhập hết hạn'


class Forbidden(ApiError):
    """Authenticated but not allowed (HTTP 403)."""
    default_code = 'FORBIDDEN'
    default_message = 'Bạn không có quyền truy cập'


class LicenseIssuanceFailed(ApiError):
    """License could not be issued; the order is still awaiting review."""
    default_code = 'LICENSE_ISSUANCE_FAILED'
    default_message = 'Không thể tạo license, vui lòng thử lại'

    @property
    def retryable(self):
        return True


class ServerError(ApiError):
    """The server failed or is unavailable (HTTP 5xx); the call may succeed later."""
    default_code = 'SERVER_ERROR'
    default_message = 'Server đang gặp sự cố, vui lòng thử lại'

    @property
    def retryable(self):
        return True


class NetworkError(ApiError):
    """Timeout, connection failure or unreadable response."""
    default_code = 'NETWORK_ERROR'
    default_message = 'Không thể kết nối đến server'

    @property
    def retryable(self):
        return True


ERRORS_BY_CODE = {
    'VALIDATION_ERROR': ValidationError,
    'PAYMENT_METHOD_UNAVAILABLE': ValidationError,
    'ORDER_NOT_FOUND': NotFound,
    'PACKAGE_NOT_FOUND': NotFound,
    'NOT_FOUND': NotFound,
    'INVALID_STATE': InvalidState,
    'LICENSE_ISSUANCE_FAILED': LicenseIssuanceFailed,
}

ERRORS_BY_STATUS = {
    400: ValidationError,
    403: Forbidden,
    404: NotFound,
    409: InvalidState,
    500: ServerError,
    502: ServerError,
    503: ServerError,
    504: ServerError,
}


def error_for(status, code=None, message=None, details=None):
    """Build the error matching an error envelope."""
    error_class = ERRORS_BY_CODE.get(code) or ERRORS_BY_STATUS.get(status, ApiError)
    return error_class(message, code=code, status=status, details=details)
