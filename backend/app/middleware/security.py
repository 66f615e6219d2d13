from starlette.datastructures import MutableHeaders

from core.config import get_settings

# The API only returns JSON and redirects, so the CSP forbids everything.
_BASE_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}
_HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware:
    """
    Add security headers to every HTTP response.

    Responses default to ``Cache-Control: no-store`` since most of them set or
    clear the session cookie; a handler that sets its own Cache-Control wins.
    HSTS is only sent in production, where the cookie is also ``Secure``.
    """

    def __init__(self, app, hsts: bool | None = None):
        self.app = app
        self.hsts = get_settings().is_production if hsts is None else hsts

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in _BASE_HEADERS.items():
                    headers[name] = value
                if "cache-control" not in headers:
                    headers["Cache-Control"] = "no-store"
                if self.hsts:
                    headers["Strict-Transport-Security"] = _HSTS
            await send(message)

        await self.app(scope, receive, send_wrapper)
