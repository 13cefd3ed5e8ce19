# app/api/ai/schemas.py
from marshmallow import Schema, fields, validate

class EnhanceRequestSchema(Schema):
    """POST /api/ai/enhance 요청 본문. 노트와 관측 대상 모두 필요합니다."""
    text = fields.Str(required=True, validate=validate.Length(max=5000))
    target = fields.Str(required=True, validate=validate.Length(max=200))

class LocationInfoRequestSchema(Schema):
    """POST /api/ai/location-info 요청 본문."""
    location = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    lat = fields.Float(allow_none=True, load_default=None, validate=validate.Range(min=-90, max=90))
    lng = fields.Float(allow_none=True, load_default=None, validate=validate.Range(min=-180, max=180))
