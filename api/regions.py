from __future__ import annotations

import logging

from flask import Blueprint, jsonify, current_app
from sqlalchemy import func, or_

from models import storage
from models.region import Region
from models.trek import Trek
from models.schemas.common import slugify
from models.schemas.region import RegionCreateSchema, RegionUpdateSchema, RegionOutSchema
from utils.decorators import admin_required, json_body
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.image_host import discard_images

logger = logging.getLogger(__name__)

bp = Blueprint("regions", __name__)

create_schema = RegionCreateSchema()
update_schema = RegionUpdateSchema()
out_schema = RegionOutSchema()
out_list_schema = RegionOutSchema(many=True)


def name_taken(session, name: str, exclude_id: str | None = None) -> bool:
    """Names clash when they match case-insensitively or share a slug."""
    q = session.query(Region).filter(or_(func.lower(Region.name) == name.lower(), Region.slug == slugify(name)))
    if exclude_id:
        q = q.filter(Region.id != exclude_id)
    return session.query(q.exists()).scalar()


@bp.get("/trekking")
def list_regions():
    """
    List all trekking regions
    ---
    tags: [Regions]
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = session.query(Region).order_by(Region.name.asc()).all()
    return jsonify({"data": out_list_schema.dump(rows)})


@bp.post("/trekking")
@admin_required()
def create_region():
    """
    Create a region
    ---
    tags: [Regions]
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
            name: { type: string }
            description: { type: string }
            image: { type: string }
            keywords: { type: array, items: { type: string } }
    responses:
      201: { description: Created }
      400: { description: Validation failed }
      409: { description: Name already exists }
    """
    session = storage.get_session()
    data = create_schema.load(json_body())
    if name_taken(session, data["name"]):
        raise ConflictError("A region with this name already exists")

    region = Region(
        name=data["name"],
        slug=slugify(data["name"]),
        description=data["description"],
        image=data["image"],
        keywords=data["keywords"],
    )
    storage.new(region)
    storage.save()
    logger.info("Created region %s", region.slug)
    return jsonify({"data": out_schema.dump(region)}), 201


@bp.put("/trekking")
@admin_required()
def update_region():
    """
    Replace a region (body carries _id)
    ---
    tags: [Regions]
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
            _id: { type: string }
            name: { type: string }
            description: { type: string }
            image: { type: string }
            keywords: { type: array, items: { type: string } }
    responses:
      200: { description: Updated }
      400: { description: Validation failed }
      404: { description: Not found }
      409: { description: Name already exists }
    """
    session = storage.get_session()
    payload = json_body()
    if not payload.get("_id"):
        raise ValidationError("Region ID is required")
    data = update_schema.load(payload)

    if name_taken(session, data["name"], exclude_id=data["id"]):
        raise ConflictError("A region with this name already exists")

    region = storage.get(Region, data["id"])
    if not region:
        raise NotFoundError("Region not found")

    if region.image and region.image != data["image"]:
        discard_images(current_app.extensions["image_host"], [region.image])

    region.name = data["name"]
    region.slug = slugify(data["name"])
    region.description = data["description"]
    region.image = data["image"]
    region.keywords = data["keywords"]
    storage.new(region)
    storage.save()
    return jsonify({"message": "Region updated successfully", "data": out_schema.dump(region)})


@bp.delete("/trekking")
@admin_required()
def delete_region():
    """
    Delete a region without treks, and its hosted image
    ---
    tags: [Regions]
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
            id: { type: string }
    responses:
      200: { description: Deleted }
      400: { description: Missing id }
      404: { description: Not found }
      409: { description: Region still has treks }
    """
    session = storage.get_session()
    region_id = json_body().get("id")
    if not region_id:
        raise ValidationError("Region ID is required")

    trek_count = session.query(Trek).filter(Trek.region_id == region_id).count()
    if trek_count > 0:
        raise ConflictError(
            f"Cannot delete region. It has {trek_count} associated trek(s). Delete all treks first."
        )

    region = storage.get(Region, region_id)
    if not region:
        raise NotFoundError("Region not found")

    discard_images(current_app.extensions["image_host"], [region.image])
    region.delete()
    logger.info("Deleted region %s", region.slug)
    return jsonify({"message": "Region and associated image deleted successfully"})
