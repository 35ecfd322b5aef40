from .errors import error_response, remote_error_response, require_confirmation

__all__ = ["error_response", "remote_error_response", "require_confirmation"]
