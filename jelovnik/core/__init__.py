from jelovnik.core.auth import create_access_token, get_current_user, require_admin, require_role
from jelovnik.core.logging import get_logger, request_id_ctx

__all__ = ["create_access_token", "get_current_user", "require_admin", "require_role", "get_logger", "request_id_ctx"]
