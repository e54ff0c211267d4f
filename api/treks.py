from __future__ import annotations

import logging

from flask import Blueprint, jsonify, current_app
from sqlalchemy import func, or_

from models import storage
from models.region import Region
from models.trek import Trek
from models.schemas.common import slugify
from models.schemas.trek import (
    TrekCreateSchema,
    TrekUpdateSchema,
    TrekOutSchema,
    TrekSummarySchema,
    GalleryImageSchema,
)
from utils.decorators import admin_required, json_body
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.image_host import discard_images

logger = logging.getLogger(__name__)

bp = Blueprint("treks", __name__)

create_schema = TrekCreateSchema()
update_schema = TrekUpdateSchema()
gallery_image_schema = GalleryImageSchema()
out_schema = TrekOutSchema()
out_list_schema = TrekOutSchema(many=True)
summary_list_schema = TrekSummarySchema(many=True)

CONTENT_FIELDS = (
    "description",
    "image",
    "overview",
    "itinerary",
    "inclusions",
    "exclusions",
    "pricing",
    "gallery",
    "faqs",
    "keywords",
)


def get_region_or_404(session, slug: str) -> Region:
    region = session.query(Region).filter(Region.slug == slug).first()
    if not region:
        raise NotFoundError("Region not found")
    return region


def get_trek_or_404(session, region_slug: str, slug: str) -> Trek:
    region = get_region_or_404(session, region_slug)
    trek = session.query(Trek).filter(Trek.region_id == region.id, Trek.slug == slug).first()
    if not trek:
        raise NotFoundError("Trek not found")
    return trek


def name_taken(session, region_id: str, name: str, exclude_id: str | None = None) -> bool:
    """Names clash within a region when they match case-insensitively or share a slug."""
    q = session.query(Trek).filter(
        Trek.region_id == region_id,
        or_(func.lower(Trek.name) == name.lower(), Trek.slug == slugify(name)),
    )
    if exclude_id:
        q = q.filter(Trek.id != exclude_id)
    return session.query(q.exists()).scalar()


def image_host():
    return current_app.extensions["image_host"]


@bp.get("/treks")
def list_all_treks():
    """
    Trek catalogue across all regions, with the lowest price per trek
    ---
    tags: [Treks]
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    rows = session.query(Trek).order_by(Trek.name.asc()).all()
    return jsonify({"data": summary_list_schema.dump(rows)})


@bp.get("/trekking/<region_slug>")
def list_region_treks(region_slug: str):
    """
    List the treks of one region
    ---
    tags: [Treks]
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Region not found }
    """
    session = storage.get_session()
    region = get_region_or_404(session, region_slug)
    rows = session.query(Trek).filter(Trek.region_id == region.id).order_by(Trek.name.asc()).all()
    return jsonify({"data": out_list_schema.dump(rows)})


@bp.post("/trekking/<region_slug>")
@admin_required()
def create_trek(region_slug: str):
    """
    Create a trek in a region
    ---
    tags: [Treks]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
            description: { type: string }
            image: { type: string }
            overview: { type: array, items: { type: object } }
            itinerary: { type: array, items: { type: object } }
            inclusions: { type: array, items: { type: string } }
            exclusions: { type: array, items: { type: string } }
            pricing: { type: array, items: { type: object } }
            gallery: { type: array, items: { type: object } }
            faqs: { type: array, items: { type: object } }
            keywords: { type: array, items: { type: string } }
    responses:
      201: { description: Created }
      400: { description: Validation failed }
      404: { description: Region not found }
      409: { description: Name already exists in region }
    """
    session = storage.get_session()
    region = get_region_or_404(session, region_slug)
    data = create_schema.load(json_body())

    if name_taken(session, region.id, data["name"]):
        raise ConflictError("A trek with this name already exists in this region")

    trek = Trek(region_id=region.id, name=data["name"], slug=slugify(data["name"]))
    for field in CONTENT_FIELDS:
        setattr(trek, field, data[field])
    storage.new(trek)
    storage.save()
    logger.info("Created trek %s in %s", trek.slug, region.slug)
    return jsonify({"data": out_schema.dump(trek)}), 201


@bp.get("/trekking/<region_slug>/<trek_slug>")
def get_trek(region_slug: str, trek_slug: str):
    """
    Get a trek by slug
    ---
    tags: [Treks]
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
      - in: path
        name: trek_slug
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Trek not found }
    """
    session = storage.get_session()
    return jsonify({"data": out_schema.dump(get_trek_or_404(session, region_slug, trek_slug))})


@bp.put("/trekking/<region_slug>/<trek_slug>")
@admin_required()
def update_trek(region_slug: str, trek_slug: str):
    """
    Replace a trek (body carries _id). Hosted images dropped by the update are deleted.
    ---
    tags: [Treks]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
      - in: path
        name: trek_slug
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            _id: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Validation failed }
      404: { description: Trek not found }
      409: { description: Name already exists in region }
    """
    session = storage.get_session()
    payload = json_body()
    if not payload.get("_id"):
        raise ValidationError("Trek ID is required")
    data = update_schema.load(payload)

    trek = storage.get(Trek, data["id"])
    if not trek:
        raise NotFoundError("Trek not found")

    if name_taken(session, trek.region_id, data["name"], exclude_id=trek.id):
        raise ConflictError("A trek with this name already exists in this region")

    stale = []
    if trek.image and trek.image != data["image"]:
        stale.append(trek.image)
    kept = {item["src"] for item in data["gallery"]}
    stale.extend(url for url in trek.gallery_urls() if url not in kept)
    discard_images(image_host(), stale)

    trek.name = data["name"]
    trek.slug = slugify(data["name"])
    for field in CONTENT_FIELDS:
        setattr(trek, field, data[field])
    storage.new(trek)
    storage.save()
    return jsonify({"message": "Trek updated successfully", "data": out_schema.dump(trek)})


@bp.delete("/trekking/<region_slug>/<trek_slug>")
@admin_required()
def delete_trek(region_slug: str, trek_slug: str):
    """
    Delete a trek with its main and gallery images
    ---
    tags: [Treks]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
      - in: path
        name: trek_slug
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Trek not found }
    """
    session = storage.get_session()
    trek = get_trek_or_404(session, region_slug, trek_slug)
    discard_images(image_host(), [trek.image, *trek.gallery_urls()])
    trek.delete()
    logger.info("Deleted trek %s", trek_slug)
    return jsonify({"message": "Trek and associated images deleted successfully"})


@bp.patch("/trekking/<region_slug>/<trek_slug>")
@bp.delete("/trekking/<region_slug>/<trek_slug>/gallery")
@admin_required()
def delete_gallery_image(region_slug: str, trek_slug: str):
    """
    Remove one image from a trek gallery and from the image host
    ---
    tags: [Treks]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: path
        name: region_slug
        type: string
        required: true
      - in: path
        name: trek_slug
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            imageUrl: { type: string }
    responses:
      200: { description: Gallery image deleted }
      400: { description: Image URL is required }
      404: { description: Trek not found }
    """
    payload = json_body()
    if not payload.get("imageUrl"):
        raise ValidationError("Image URL is required")
    image_url = gallery_image_schema.load(payload)["image_url"]

    session = storage.get_session()
    trek = get_trek_or_404(session, region_slug, trek_slug)
    discard_images(image_host(), [image_url])

    trek.gallery = [item for item in trek.gallery if item.get("src") != image_url]
    storage.new(trek)
    storage.save()
    return jsonify({"message": "Gallery image deleted successfully", "data": out_schema.dump(trek)})
