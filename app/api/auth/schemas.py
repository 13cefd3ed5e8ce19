# app/api/auth/schemas.py
from marshmallow import Schema, fields, validate

class SessionCreateSchema(Schema):
    """POST /api/auth/session 요청의 유효성을 검사하는 스키마"""
    id_token = fields.Str(
        required=True,
        data_key='idToken',
        validate=validate.Length(min=1),
        metadata={"description": "클라이언트가 Firebase Authentication으로 받은 ID 토큰"}
    )

class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)
