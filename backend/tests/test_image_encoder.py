"""
Unit tests for image base64 encoding.
"""

import base64
import os

import pytest

from invoice_relay.errors import MediaReadError, RelayIOError
from invoice_relay.services.image_encoder import encode_image


class TestEncodeImage:

    def test_decoded_output_matches_original_bytes(self, tmp_path):
        original = os.urandom(5000)
        path = tmp_path / "invoice.jpg"
        path.write_bytes(original)

        encoded = encode_image(path)

        assert base64.b64decode(encoded) == original

    def test_output_is_single_line_standard_alphabet(self, tmp_path):
        path = tmp_path / "invoice.png"
        path.write_bytes(bytes(range(256)) * 20)

        encoded = encode_image(str(path))

        assert "\n" not in encoded
        assert "-" not in encoded and "_" not in encoded

    def test_empty_file_encodes_to_empty_string(self, tmp_path):
        path = tmp_path / "empty.png"
        path.write_bytes(b"")

        assert encode_image(path) == ""

    def test_missing_file_raises_media_read_error(self, tmp_path):
        with pytest.raises(MediaReadError) as exc_info:
            encode_image(tmp_path / "missing.png")

        # Reported in the IO category
        assert isinstance(exc_info.value, RelayIOError)
