"""Image upload helpers - uploaded files are stored inline as data URLs."""

import base64
import mimetypes

from django.conf import settings


def encode_image_data_url(uploaded_file) -> str:
    """
    Read an uploaded image into a ``data:`` URL.

    Args:
        uploaded_file: Django UploadedFile (or any object with ``read()``,
            ``name`` and optionally ``content_type``)

    Returns:
        ``data:<mime>;base64,<payload>`` string

    Raises:
        ValueError: If the file is not an image or exceeds the size limit
    """
    content_type = getattr(uploaded_file, 'content_type', None)
    if not content_type:
        content_type, _ = mimetypes.guess_type(getattr(uploaded_file, 'name', '') or '')

    if not content_type or not content_type.startswith('image/'):
        raise ValueError("Only image files can be uploaded")

    data = uploaded_file.read()
    if not data:
        raise ValueError("Uploaded image is empty")
    if len(data) > settings.MAX_IMAGE_UPLOAD_BYTES:
        raise ValueError(
            f"Image is too large ({len(data)} bytes, limit {settings.MAX_IMAGE_UPLOAD_BYTES})"
        )

    payload = base64.b64encode(data).decode('ascii')
    return f"data:{content_type};base64,{payload}"


def placeholder_image_url(seed: str) -> str:
    """Generated image reference for items imported without one."""
    return settings.PLACEHOLDER_IMAGE_URL.format(seed=seed)
