"""
SMS forwarder error types.
"""

from typing import Any, Optional


class ForwarderError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigError(ForwarderError):
    """A persisted forwarder configuration is incomplete or malformed."""

    def __init__(self, message: str, code: str = "config_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class DeliveryFailure(ForwarderError):
    """The transport could not complete a request."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("delivery_failure", message, details)


class SetupCheckFailure(ForwarderError):
    """The managed relay did not confirm the Telegram link."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("setup_check_failure", message, details)
