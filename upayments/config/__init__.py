from .settings import UpaymentsSettings, get_settings, reset_settings

__all__ = ["UpaymentsSettings", "get_settings", "reset_settings"]
