# app/core/validation.py

"""
서비스 계층에서 사용하는 구조 검증기(validator)입니다.

라우터에서 이미 한 번 검증된 DTO라도, 서비스는 자체적으로 한 번 더 검증합니다.
(서비스가 라우터 외부에서 직접 호출되는 경우에도 동일한 규칙이 적용되도록)
검증기 인스턴스는 서비스 생성 시 주입됩니다.
"""

from typing import Any, Dict, Type, TypeVar

import pydantic
from pydantic import BaseModel

from app.core.exceptions import ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def format_error_fields(errors: list) -> Dict[str, str]:
    """
    pydantic의 에러 목록을 {"필드명": "메시지"} 형태로 변환합니다.
    FastAPI RequestValidationError의 loc에 포함된 "body", "query" 등의 접두사는 제거합니다.
    """
    fields: Dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        fields.setdefault(field, error.get("msg", "invalid value"))
    return fields


class SchemaValidator:
    """pydantic 스키마로 입력값을 검증하고, 실패 시 도메인 ValidationError를 발생시킵니다."""

    def validate(self, schema: Type[SchemaType], data: Any) -> SchemaType:
        if isinstance(data, BaseModel):
            # 명시적으로 설정된 필드만 다시 검증하여 exclude_unset 의미를 유지합니다.
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(fields=format_error_fields(e.errors())) from e
