# ============================================================================
# SCOPE: GLOBAL
# Description: Modelos Pydantic para respuestas de UPayments.
# ============================================================================
"""
UPayments Response Models.

Every endpoint answers ``{status: bool, data?: object, message?: string}``,
but field types are not enforced: bodies are returned as the gateway sent them.
Extra keys are kept so callers can reach endpoint-specific fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ApiResponse(BaseModel):
    """Decoded UPayments response body."""

    status: Any = None
    data: Any = None
    message: Any = None

    model_config = ConfigDict(extra="allow")

    @property
    def ok(self) -> bool:
        """True unless the gateway reported a falsy, non-null ``status``."""
        return self.status is None or bool(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Return the body as received, dropping fields the gateway omitted."""
        return self.model_dump(exclude_unset=True)
