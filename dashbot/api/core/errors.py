"""Dashboard authentication and OAuth errors"""


class DashboardError(Exception):
    """Base error carrying a machine-readable ``code``.

    The code is what the browser sees, either as ``?error=<code>`` on the
    login redirect or as ``{"error": code}`` in a 401 body.
    """

    code = "server_error"

    def __init__(self, code: str | None = None, detail: str | None = None):
        if code is not None:
            self.code = code
        self.detail = detail
        super().__init__(detail or self.code)


class AuthError(DashboardError):
    UNAUTHENTICATED = "unauthenticated"
    SESSION_EXPIRED = "session_expired"
    INVALID_STATE = "invalid_state"

    code = UNAUTHENTICATED

    def __init__(self, code: str | None = None, detail: str | None = None, *, clear_cookie: bool = False):
        super().__init__(code, detail)
        self.clear_cookie = clear_cookie


class OAuthError(DashboardError):
    PROVIDER_ERROR = "oauth_provider_error"
    MISSING_CODE = "missing_code"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    SERVER_ERROR = "server_error"

    def __init__(self, code: str, detail: str | None = None, *, stage: str | None = None):
        super().__init__(code, detail)
        self.stage = stage
