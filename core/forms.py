"""
Multipart form helpers

Browser multipart bodies are read once and re-sent to the backend as
httpx `data` / `files` arguments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from .backend_client import FileField


@dataclass
class FormPayload:
    """Text fields and uploaded files of a multipart request"""
    fields: List[Tuple[str, str]] = field(default_factory=list)
    files: List[FileField] = field(default_factory=list)

    def get(self, name: str) -> Optional[str]:
        for key, value in self.fields:
            if key == name:
                return value
        return None

    def files_named(self, name: str) -> List[FileField]:
        return [f for f in self.files if f[0] == name]

    def data(self) -> Dict[str, Any]:
        """Fields as httpx `data`; repeated keys become lists"""
        result: Dict[str, Any] = {}
        for key, value in self.fields:
            if key in result:
                existing = result[key]
                result[key] = existing + [value] if isinstance(existing, list) else [existing, value]
            else:
                result[key] = value
        return result


def is_multipart(request: Request) -> bool:
    return "multipart/form-data" in request.headers.get("content-type", "")


async def read_form_payload(request: Request) -> FormPayload:
    """Read a multipart (or urlencoded) body into a FormPayload"""
    payload = FormPayload()
    form = await request.form()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            content = await value.read()
            payload.files.append(
                (key, (value.filename or key, content, value.content_type or "application/octet-stream"))
            )
        else:
            payload.fields.append((key, value))
    return payload


__all__ = ["FormPayload", "is_multipart", "read_form_payload"]
