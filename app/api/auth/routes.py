# app/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
)
from marshmallow import ValidationError

from app.api.auth.schemas import SessionCreateSchema, LogoutRequestSchema
from app.api.users.schemas import UserProfileResponseSchema

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/session', methods=['POST'])
def create_session():
    """
    Firebase ID 토큰으로 로그인합니다.
    첫 로그인이면 프로필을 만들고, 이후에는 닉네임/이메일/사진을 최신 값으로 갱신합니다.
    """
    auth_service = current_app.services['auth']
    validated_data = SessionCreateSchema().load(request.get_json() or {})

    profile, is_new_user = auth_service.sign_in_with_id_token(validated_data['id_token'])
    identity = profile.uid
    return jsonify({
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "user_id": identity,
        "is_new_user": is_new_user,
        "user_info": UserProfileResponseSchema().dump(profile),
    }), 200


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    # 만료/타입/Blocklist 검사는 데코레이터와 token_in_blocklist_loader가 수행
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json() or {})
        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 무효화할 수 있도록 만료 검사는 생략
        options = {"verify_exp": False}
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options=options)
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options=options)

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp'],
        )
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
