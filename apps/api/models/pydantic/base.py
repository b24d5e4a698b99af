"""Base Pydantic 2 model classes shared by the gateway models."""

# flake8: noqa: E501


from pydantic import BaseModel, ConfigDict


class ImmutableModel(BaseModel):
    """Frozen model for response payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RequestModel(BaseModel):
    """Model for inbound payloads.

    Unknown keys are ignored rather than rejected: dictionary payloads come from
    UI clients that send their own bookkeeping fields alongside the schema.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)
