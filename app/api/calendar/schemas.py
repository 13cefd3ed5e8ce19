# app/api/calendar/schemas.py
from marshmallow import Schema, fields, validate

from app.models.calendar_event import EventType

EVENT_TYPES = [t.value for t in EventType]

class CalendarEventCreateSchema(Schema):
    """POST /api/calendar/events 요청 본문의 유효성을 검사합니다."""
    date = fields.Str(required=True)
    title = fields.Str(required=True, validate=validate.Length(max=100))
    description = fields.Str(required=True, validate=validate.Length(max=1000))
    time = fields.Str(allow_none=True, validate=validate.Length(max=100))
    type = fields.Str(validate=validate.OneOf(EVENT_TYPES))

class CalendarEventUpdateSchema(CalendarEventCreateSchema):
    """PATCH /api/calendar/events/{id} 요청 본문. 모든 필드가 선택입니다."""
    date = fields.Str()
    title = fields.Str(validate=validate.Length(max=100))
    description = fields.Str(validate=validate.Length(max=1000))

class CalendarEventResponseSchema(Schema):
    id = fields.Str(allow_none=True)
    date = fields.Str()
    title = fields.Str()
    description = fields.Str()
    time = fields.Str(allow_none=True)
    type = fields.Enum(EventType, by_value=True)
    user_id = fields.Str(allow_none=True, data_key='userId')
    author_name = fields.Str(allow_none=True, data_key='authorName')
    created_at = fields.Int(allow_none=True, data_key='createdAt')
    is_static = fields.Bool(data_key='isStatic', dump_only=True)
