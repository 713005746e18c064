"""
Image encoding for the analysis API.
"""

import base64
from pathlib import Path
from typing import Union

from invoice_relay.errors import MediaReadError


def encode_image(path: Union[str, Path]) -> str:
    """
    Read a stored image and return it as standard base64 (no line breaks).

    Raises:
        MediaReadError: if the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            image_data = f.read()
    except OSError as e:
        raise MediaReadError(f"Failed to read image file {path}: {e}")

    return base64.b64encode(image_data).decode("ascii")
