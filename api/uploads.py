from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, current_app

from utils.decorators import admin_required, json_body
from utils.errors import InternalError, ValidationError
from utils.image_host import ImageHostError

logger = logging.getLogger(__name__)

bp = Blueprint("uploads", __name__)


def _file_size(file) -> int:
    stream = file.stream
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return size


@bp.post("/upload")
@admin_required()
def upload_image():
    """
    Upload an image to the image host
    ---
    tags: [Uploads]
    security:
      - Bearer: []
    consumes: [multipart/form-data]
    parameters:
      - in: formData
        name: file
        type: file
        required: true
    responses:
      200: { description: "{url, publicId, width, height}" }
      400: { description: Missing file, bad type or too large }
      500: { description: Upload failed }
    """
    file = request.files.get("file")
    if file is None:
        raise ValidationError("No file provided")

    if file.mimetype not in current_app.config["ALLOWED_UPLOAD_TYPES"]:
        raise ValidationError("Invalid file type. Only JPEG, PNG, WebP, and GIF files are allowed.")

    if _file_size(file) > current_app.config["MAX_UPLOAD_BYTES"]:
        raise ValidationError("File size too large. Maximum size is 10MB.")

    try:
        result = current_app.extensions["image_host"].upload(file.stream)
    except ImageHostError as exc:
        logger.error("Upload error: %s", exc)
        raise InternalError("Failed to upload image")
    logger.info("Uploaded image %s", result.get("publicId"))
    return jsonify(result)


@bp.delete("/upload")
@admin_required()
def delete_image():
    """
    Delete an image from the image host by public id
    ---
    tags: [Uploads]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            publicId: { type: string }
    responses:
      200: { description: Deleted }
      400: { description: Public ID is required }
      500: { description: Delete failed }
    """
    public_id = json_body().get("publicId")
    if not public_id:
        raise ValidationError("Public ID is required")
    try:
        result = current_app.extensions["image_host"].destroy(public_id)
    except ImageHostError as exc:
        logger.error("Delete error: %s", exc)
        raise InternalError("Failed to delete image")
    return jsonify({"message": "Image deleted successfully", "result": result})
