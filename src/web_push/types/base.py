"""Base model for Web Push values that cross a wire or a config boundary."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """
    Immutable, strictly validated model with camelCase JSON names.

    Browsers describe subscriptions and encrypted messages with camelCase
    keys such as `publicKey`, so serialized models use the same
    names. Python code keeps snake_case field names.

    Strict mode rejects lossy coercions such as a str where bytes are
    expected, which would otherwise hide key material being passed in the
    wrong encoding.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )
