"""JSON Schema of feature documents."""

from functools import cache
from json import dumps
from typing import TYPE_CHECKING

from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue, models_json_schema

from cuke_core.schema import ElementDocument, FeatureHeader

if TYPE_CHECKING:
    from pydantic_core import core_schema as core


class SchemaGenerator(GenerateJsonSchema):
    """JSON Schema generator for feature documents.

    A feature file is a multi-document YAML stream, so the schema
    accepts either a feature header or an element document. Editors
    validate each document of the stream against it.
    """

    @classmethod
    @cache
    def make_schema(cls, indent: int | str | None = 4) -> str:
        """Generate the JSON Schema of feature documents.

        Args:
            indent: Indentation level used for JSON formatting.

        Returns:
            Serialized JSON Schema string.
        """
        refs, definitions = models_json_schema(
            [(FeatureHeader, 'validation'), (ElementDocument, 'validation')],
            schema_generator=cls,
        )

        schema = {
            **definitions,
            'anyOf': [
                refs[(FeatureHeader, 'validation')],
                refs[(ElementDocument, 'validation')],
            ],
            'title': 'cuke-core',
            'description': 'JSON Schema for feature documents',
            '$schema': cls.schema_dialect,
        }

        return dumps(
            schema,
            ensure_ascii=False,
            sort_keys=True,
            indent=indent,
        )

    def int_schema(self, schema: 'core.IntSchema') -> JsonSchemaValue:
        """Generate JSON Schema for integers.

        Line numbers are filled in by the parser; documents never
        declare them, so they are left out of editor completions.
        """
        return {**super().int_schema(schema), 'readOnly': True}
