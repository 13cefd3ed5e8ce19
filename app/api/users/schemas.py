# app/api/users/schemas.py
from marshmallow import Schema, fields, validate

class UserProfileResponseSchema(Schema):
    """
    GET /api/users/me
    본인 프로필 응답 스키마. 저장 필드명(camelCase)을 그대로 사용합니다.
    """
    uid = fields.Str(required=True)
    email = fields.Str(allow_none=True)
    display_name = fields.Str(allow_none=True, data_key='displayName')
    photo_url = fields.Str(allow_none=True, data_key='photoURL')
    equipment = fields.Str()
    region = fields.Str()
    followers = fields.List(fields.Str())
    following = fields.List(fields.Str())
    follower_count = fields.Method('get_follower_count', data_key='followerCount', dump_only=True)
    following_count = fields.Method('get_following_count', data_key='followingCount', dump_only=True)

    def get_follower_count(self, obj):
        return len(obj.followers)

    def get_following_count(self, obj):
        return len(obj.following)

class UserPublicResponseSchema(UserProfileResponseSchema):
    """
    GET /api/users/{uid}
    다른 사용자의 프로필 응답 스키마. email은 제외합니다.
    """
    class Meta:
        exclude = ('email',)

class ProfileUpdateSchema(Schema):
    """PATCH /api/users/me 요청 본문의 유효성을 검사합니다."""
    display_name = fields.Str(data_key='displayName', validate=validate.Length(max=50))
    equipment = fields.Str(validate=validate.Length(max=200))
    region = fields.Str(validate=validate.Length(max=100))
