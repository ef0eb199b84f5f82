"""The value every service operation returns.

A result is one of three shapes:

* success: ``ok=True`` with the operation's payload in ``data``;
* aborted: ``ok=True`` with ``data["aborted"] = True`` (a declined
  confirmation, nothing changed);
* rejected: ``ok=False`` with a :class:`ServiceError`.

Hook and persistence problems never fail an operation; they are carried
as ``warnings``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable ``code`` plus a human ``message``."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call, serialized as-is by ``--json``.

    ``op`` names the operation (``"add_reward"``, ``"set_mode"``...) and
    selects the human renderer. ``meta`` is reserved for diagnostics and
    is empty unless a caller fills it.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def aborted(self) -> bool:
        return bool(self.data.get("aborted"))

    @classmethod
    def rejected(
        cls, op: str, code: str, message: str, **detail: Any
    ) -> ServiceResult:
        """A failed result for input the operation cannot act on."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
