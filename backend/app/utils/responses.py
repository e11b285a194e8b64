"""
Response envelope helpers.

Every endpoint answers with:
    {"status": "SUCCESS", "message": ..., "data": ..., "pagination": {...}?}
Errors use app.core.exceptions.error_response.
"""
from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel

SUCCESS = "SUCCESS"


def success_response(
    message: str,
    data: Any = None,
    pagination: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": SUCCESS, "message": message, "data": data}
    if pagination is not None:
        body["pagination"] = pagination
    return body


def serialize(schema: Type[BaseModel], obj: Any) -> Optional[Dict[str, Any]]:
    """ORM object -> JSON-ready dict through a from_attributes schema"""
    if obj is None:
        return None
    return schema.model_validate(obj).model_dump(mode="json")


def serialize_many(schema: Type[BaseModel], objs: Iterable[Any]) -> list:
    return [schema.model_validate(obj).model_dump(mode="json") for obj in objs]
