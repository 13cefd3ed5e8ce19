# app/api/users/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from app.api.users.schemas import UserProfileResponseSchema, UserPublicResponseSchema, ProfileUpdateSchema

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필(팔로우 목록 포함)을 조회합니다."""
    profile_service = current_app.services['profiles']
    profile = profile_service.get_profile(get_jwt_identity())
    if not profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(profile)), 200


@users_bp.route('/me', methods=['PATCH'])
@jwt_required()
def update_my_profile():
    """
    닉네임, 기본 장비, 관측 지역을 수정합니다.
    장비/지역은 새 관측 일지를 작성할 때 기본값으로 사용됩니다.
    """
    profile_service = current_app.services['profiles']
    try:
        update_data = ProfileUpdateSchema().load(request.get_json() or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    if not update_data:
        return jsonify({"error_code": "NO_DATA", "message": "수정할 데이터가 없습니다."}), 400

    profile = profile_service.update_profile(get_jwt_identity(), update_data)
    if not profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(profile)), 200


@users_bp.route('/<string:uid>', methods=['GET'])
def get_user_profile(uid: str):
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    profile_service = current_app.services['profiles']
    profile = profile_service.get_profile(uid)
    if not profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPublicResponseSchema().dump(profile)), 200
