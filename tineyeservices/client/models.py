from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ServiceResponse(BaseModel):
    """A parsed TinEye Services API response.

    `status` is `ok`, `warn` or `fail`; `error` holds messages when it is not
    `ok`. The shape of `result` depends on the API method. Keys this model does
    not declare are kept, and `raw` gives back the document exactly as the
    service sent it.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    status: str
    method: Optional[str] = None
    result: List[Any] = Field(default_factory=list)
    error: List[str] = Field(default_factory=list)

    _document: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_document(cls, document: Any) -> "ServiceResponse":
        """Validate a decoded JSON document, keeping a copy of it."""

        resp = cls.model_validate(document)
        resp._document = deepcopy(document)
        return resp

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def raw(self) -> Dict[str, Any]:
        if self._document is not None:
            return deepcopy(self._document)
        return self.model_dump(mode="python")

    def __getitem__(self, key: str) -> Any:
        return self.raw[key]
