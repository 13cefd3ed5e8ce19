# app/api/journals/schemas.py
from marshmallow import Schema, fields, validate

# --- 재사용을 위한 중첩 스키마 ---
class CoordinatesSchema(Schema):
    """지도 표시용 좌표."""
    lat = fields.Float(required=True, validate=validate.Range(min=-90, max=90))
    lng = fields.Float(required=True, validate=validate.Range(min=-180, max=180))

class CommentResponseSchema(Schema):
    """관측 일지에 포함된 댓글 응답 스키마."""
    id = fields.Str(required=True)
    user_id = fields.Str(data_key='userId')
    user_name = fields.Str(data_key='userName')
    text = fields.Str()
    created_at = fields.Int(data_key='createdAt')

# --- API 요청/응답 스키마 ---

class JournalCreateSchema(Schema):
    """POST /api/journals 요청 본문. 필수 값(제목/관측 내용)의 공백 검사는 서비스에서 수행합니다."""
    title = fields.Str(required=True, validate=validate.Length(max=200))
    description = fields.Str(required=True, validate=validate.Length(max=5000))
    date = fields.Str(validate=validate.Length(max=20))
    location = fields.Str(validate=validate.Length(max=200))
    equipment = fields.Str(validate=validate.Length(max=200))
    target = fields.Str(validate=validate.Length(max=200))
    observers = fields.Str(validate=validate.Length(max=200))
    image_url = fields.Str(data_key='imageUrl', allow_none=True)
    coordinates = fields.Nested(CoordinatesSchema, allow_none=True)

class JournalUpdateSchema(JournalCreateSchema):
    """PATCH /api/journals/{id} 요청 본문. 모든 필드가 선택입니다."""
    title = fields.Str(validate=validate.Length(max=200))
    description = fields.Str(validate=validate.Length(max=5000))

class JournalResponseSchema(Schema):
    """관측 일지 응답 스키마. 저장 필드명(camelCase)을 그대로 사용합니다."""
    id = fields.Str(dump_only=True)
    user_id = fields.Str(data_key='userId')
    created_at = fields.Int(data_key='createdAt')
    title = fields.Str()
    date = fields.Str()
    location = fields.Str()
    equipment = fields.Str()
    target = fields.Str()
    description = fields.Str()
    observers = fields.Str()
    author_name = fields.Str(data_key='authorName')
    image_url = fields.Str(data_key='imageUrl', allow_none=True)
    coordinates = fields.Nested(CoordinatesSchema, allow_none=True)
    likes = fields.List(fields.Str())
    comments = fields.List(fields.Nested(CommentResponseSchema))
    like_count = fields.Method('get_like_count', data_key='likeCount', dump_only=True)
    comment_count = fields.Method('get_comment_count', data_key='commentCount', dump_only=True)

    def get_like_count(self, obj):
        return len(obj.likes)

    def get_comment_count(self, obj):
        return len(obj.comments)

class CommentCreateSchema(Schema):
    """POST /api/journals/{id}/comments 및 PATCH 댓글 수정 요청 본문."""
    text = fields.Str(required=True, validate=validate.Length(max=1000))
