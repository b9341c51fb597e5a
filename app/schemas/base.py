from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class InputSchema(BaseSchema):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
