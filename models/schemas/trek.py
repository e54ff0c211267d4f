from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from models.schemas.common import required_text, keyword_list


class _Lenient(Schema):
    class Meta:
        unknown = EXCLUDE


class OverviewItemSchema(_Lenient):
    icon = required_text()
    heading = required_text()
    description = required_text()


class ItineraryItemSchema(_Lenient):
    heading = required_text()
    description = required_text()


# Keys keep the camelCase wire names; tiers are stored as-is in the JSON column.
class PricingTierSchema(_Lenient):
    minPersons = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    maxPersons = fields.Integer(required=True, strict=True)
    price = fields.Float(required=True, validate=validate.Range(min=0))

    @validates_schema
    def _validate_bounds(self, data, **kwargs):
        low, high = data.get("minPersons"), data.get("maxPersons")
        if low is not None and high is not None and high < low:
            raise ValidationError("maxPersons must be greater than or equal to minPersons.", "maxPersons")


class GalleryItemSchema(_Lenient):
    src = required_text()
    alt = required_text()
    caption = required_text()


class FaqSchema(_Lenient):
    question = required_text()
    answer = required_text()


class TrekCreateSchema(_Lenient):
    name = required_text(error_messages={"required": "Trek name is required."})
    description = required_text(error_messages={"required": "Trek description is required."})
    image = required_text(error_messages={"required": "Trek image is required."})
    overview = fields.List(fields.Nested(OverviewItemSchema), load_default=list)
    itinerary = fields.List(fields.Nested(ItineraryItemSchema), load_default=list)
    inclusions = keyword_list()
    exclusions = keyword_list()
    pricing = fields.List(fields.Nested(PricingTierSchema), load_default=list)
    gallery = fields.List(fields.Nested(GalleryItemSchema), load_default=list)
    faqs = fields.List(fields.Nested(FaqSchema), load_default=list)
    keywords = keyword_list()


class TrekUpdateSchema(TrekCreateSchema):
    id = fields.String(required=True, data_key="_id")


class GalleryImageSchema(_Lenient):
    image_url = fields.String(required=True, data_key="imageUrl", validate=validate.Length(min=1))


class TrekOutSchema(Schema):
    id = fields.String(data_key="_id")
    region_id = fields.String(data_key="regionId")
    name = fields.String()
    slug = fields.String()
    description = fields.String()
    image = fields.String()
    overview = fields.List(fields.Dict())
    itinerary = fields.List(fields.Dict())
    inclusions = fields.List(fields.String())
    exclusions = fields.List(fields.String())
    pricing = fields.List(fields.Dict())
    gallery = fields.List(fields.Dict())
    faqs = fields.List(fields.Dict())
    keywords = fields.List(fields.String())
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class TrekSummarySchema(Schema):
    """Catalogue projection used by the public trek listing."""
    id = fields.String(data_key="_id")
    name = fields.String()
    description = fields.String()
    pricing = fields.List(fields.Dict())
    slug = fields.String()
    itinerary = fields.List(fields.Dict())
    image = fields.String()
    lowest_price = fields.Float(data_key="lowestPrice", allow_none=True)
