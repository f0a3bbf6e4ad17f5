from pydantic import AnyHttpUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_http_url = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    """Request body schema: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self):
        """Only the fields the client actually sent, for partial updates"""
        return self.model_dump(exclude_unset=True)


def is_http_url(value):
    """True for absolute http(s) URLs; the original string is what gets stored"""
    try:
        _http_url.validate_python(value)
    except ValidationError:
        return False
    return True
