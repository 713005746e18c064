"""
Builds the invoice extraction request sent to Claude.
"""

from invoice_relay.models.analysis import (
    AnalysisRequest,
    ImageBlock,
    ImageSource,
    TextBlock,
)

EXTRACTION_PROMPT = (
    "This image is an invoice. Extract key invoice details in JSON format. "
    "Do not include any other text."
)


def build_analysis_request(
    base64_image: str,
    media_type: str,
    model: str,
    max_tokens: int,
) -> AnalysisRequest:
    """
    Compose the two-block request: the image first, then the instruction.

    ``model`` and ``max_tokens`` come from Settings.
    """
    return AnalysisRequest(
        model=model,
        max_tokens=max_tokens,
        content=[
            ImageBlock(source=ImageSource(media_type=media_type, data=base64_image)),
            TextBlock(text=EXTRACTION_PROMPT),
        ],
    )
