__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "get_current_user_optional",
    "oauth2_scheme",
    "is_email_enabled",
    "send_email",
    "get_file_storage",
]


def __getattr__(name):
    if name in {
        "verify_password",
        "get_password_hash",
        "create_access_token",
        "authenticate_user",
        "get_current_user",
        "get_current_user_optional",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"is_email_enabled", "send_email"}:
        from . import email as _email
        return getattr(_email, name)
    if name == "get_file_storage":
        from . import storage as _storage
        return _storage.get_file_storage
    raise AttributeError(f"module 'jackemate.utils' has no attribute '{name}'")
