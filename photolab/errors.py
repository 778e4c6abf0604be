"""
Typed failures raised by the imaging core and the upload store.

Each kind carries the HTTP status and machine-readable code the API layer
reports, so distinct failures never collapse into one generic 500.
"""

class PhotolabError(Exception):
    status_code: int = 500
    code: str = "internal_error"

class DecodeError(PhotolabError):
    """Bytes are not a recognized image container or are corrupt."""
    status_code = 400
    code = "decode_error"

class InvalidImageError(PhotolabError):
    """Decoded image has no pixels."""
    status_code = 422
    code = "invalid_image"

class UnsupportedFormatError(PhotolabError):
    """Requested output format is outside the supported set."""
    status_code = 415
    code = "unsupported_format"

class EncodeError(PhotolabError):
    """The codec failed while serializing a buffer."""
    status_code = 500
    code = "encode_error"

class ImageNotFoundError(PhotolabError):
    """No stored original matches the given handle."""
    status_code = 404
    code = "not_found"
