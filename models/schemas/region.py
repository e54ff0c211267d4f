from marshmallow import Schema, fields, EXCLUDE

from models.schemas.common import required_text, keyword_list


class RegionCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = required_text(error_messages={"required": "Region name is required."})
    description = required_text(error_messages={"required": "Region description is required."})
    image = required_text(error_messages={"required": "Region image is required."})
    keywords = keyword_list()


class RegionUpdateSchema(RegionCreateSchema):
    id = fields.String(required=True, data_key="_id")


class RegionOutSchema(Schema):
    id = fields.String(data_key="_id")
    name = fields.String()
    slug = fields.String()
    description = fields.String()
    image = fields.String()
    keywords = fields.List(fields.String())
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
