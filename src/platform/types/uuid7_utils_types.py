"""
https://docs.pydantic.dev/latest/concepts/types/#customizing-validation-with-__get_pydantic_core_schema__

UUID7 type for pydantic schemas

Booking, promo code and audit ids are uuid_utils.UUID values, which pydantic
cannot validate or describe in OpenAPI on its own. Use UtilsUUID7 in request
and response schemas and path parameters:

```python
class BookingResponse(BaseModel):
    id: UtilsUUID7  # "019a3fa5-..." <-> uuid_utils.UUID
```
"""

from typing import Any
import uuid

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from uuid_utils import UUID


class UtilsUUID7(UUID):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        JSON mode accepts strings only; Python mode also accepts uuid_utils and
        stdlib UUID objects (the latter come back from the database driver).
        Always serialized as a string.
        """

        def _to_uuid(value: Any) -> UUID:
            try:
                return UUID(str(value))
            except Exception as e:
                raise ValueError(f'Invalid UUID: {value}') from e

        def validate_uuid_python(value: Any) -> UUID:
            if isinstance(value, UUID):
                return value
            if isinstance(value, uuid.UUID):
                return UUID(str(value))
            return _to_uuid(value)

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(_to_uuid),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate_uuid_python),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used='always', return_schema=core_schema.str_schema()
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema_: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            'type': 'string',
            'format': 'uuid',
            'description': 'UUID7 identifier',
            'example': '01936d8f-5e73-7c4e-a9c5-123456789abc',
        }
