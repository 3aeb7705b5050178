"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, ConfigDict


class TitleRequest(BaseModel):
    """Body of create and rename requests.

    A missing title is treated as an empty one and rejected by the store.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
