"""
Schema 基类模块
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Schema 基类

    对外字段使用 camelCase，请求体同时接受 snake_case
    """

    model_config = ConfigDict(
        from_attributes=True,  # 支持从 ORM 模型转换
        populate_by_name=True,  # 支持字段名填充
        alias_generator=to_camel,
        str_strip_whitespace=True,  # 自动去除字符串首尾空格
    )


class TimestampSchema(BaseSchema):
    """带时间戳的 Schema 基类"""

    id: str
    created_at: datetime
    updated_at: datetime
