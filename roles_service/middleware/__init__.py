"""HTTP middleware: request ID and caller context.

Applied in the app factory; order matters (first added = innermost).
"""

from roles_service.middleware.caller_context import CallerContextMiddleware
from roles_service.middleware.request_id import RequestIDMiddleware

__all__ = ["CallerContextMiddleware", "RequestIDMiddleware"]
