"""
Pydantic models for the Anthropic Messages API exchange.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ImageSource(BaseModel):
    """Inline base64 image payload."""
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: ImageSource


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


# A request content block is either an image or a text block, tagged by "type"
ContentBlock = Annotated[Union[ImageBlock, TextBlock], Field(discriminator="type")]


class AnalysisRequest(BaseModel):
    """
    A single-turn request to the analysis API.

    ``content`` is sent as the content of one user message, in order.
    """
    model: str
    max_tokens: int
    content: List[ContentBlock] = Field(min_length=1)

    def to_payload(self) -> dict:
        """Return the JSON body expected by POST /v1/messages."""
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [block.model_dump() for block in self.content],
                }
            ],
        }


class ResponseBlock(BaseModel):
    """A content block in the response. Non-text blocks carry no text."""
    model_config = ConfigDict(extra="ignore")

    type: str
    text: Optional[str] = None


class APIErrorDetail(BaseModel):
    """Error payload returned by the API: {"error": {"type", "message"}}."""
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    message: Optional[str] = None


class AnalysisResponse(BaseModel):
    """
    Decoded analysis API response.

    When ``error`` is set the content must be treated as unreliable.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    role: str = ""
    model: str = ""
    content: List[ResponseBlock] = []
    created_at: Optional[int] = None
    stop_reason: Optional[str] = None
    error: Optional[APIErrorDetail] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None and bool(self.error.type or self.error.message)

    def first_text(self) -> Optional[str]:
        """Return the text of the first text block, or None."""
        for block in self.content:
            if block.type == "text" and block.text is not None:
                return block.text
        return None
