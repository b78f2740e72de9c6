"""
统一响应模块

所有成功/失败响应都包在 {success, code, message, data} 信封里，
data 中的 pydantic 对象按别名（camelCase）序列化
"""
from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """响应信封，仅用于 OpenAPI 声明和出参校验"""
    success: bool = True
    code: int = 200
    message: str = "操作成功"
    data: Optional[T] = None


DictResponse = ResponseModel[dict]


def to_payload(data: Any) -> Any:
    """把 schema 对象（或其列表）转为可直接放进信封的数据"""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [to_payload(item) for item in data]
    return data


def success_response(data: Any = None, message: str = "操作成功", code: int = 200) -> dict:
    return {"success": True, "code": code, "message": message, "data": to_payload(data)}


def error_response(message: str = "操作失败", code: int = 400, data: Any = None) -> dict:
    return {"success": False, "code": code, "message": message, "data": data}
