# app/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import Schema, fields, validate, ValidationError

# 이 블루프린트에 속한 모든 API는 '/api/uploads' 접두사 URL을 갖습니다.
uploads_bp = Blueprint('uploads', __name__)

ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp', 'image/heic')


class UploadUrlRequestSchema(Schema):
    """POST /api/uploads/url 요청 본문의 유효성을 검사합니다."""
    upload_type = fields.Str(required=True, validate=validate.OneOf(["journal_image", "profile_image"]))
    filename = fields.Str(required=True, validate=validate.Length(min=1))
    content_type = fields.Str(required=True, validate=validate.OneOf(ALLOWED_IMAGE_TYPES))


@uploads_bp.route('/image', methods=['POST'])
@jwt_required()
def upload_image():
    """
    관측 사진을 multipart/form-data('file' 필드)로 받아 저장하고 공개 URL을 반환합니다.
    반환된 URL을 관측 일지 작성/수정 요청의 imageUrl로 그대로 사용합니다.
    """
    user_id = get_jwt_identity()
    file = request.files.get('file')
    if file is None or not file.filename:
        return jsonify({"error_code": "FILE_REQUIRED", "message": "업로드할 사진 파일이 필요합니다."}), 400
    if file.mimetype not in ALLOWED_IMAGE_TYPES:
        return jsonify({"error_code": "INVALID_FILE_TYPE", "message": "이미지 파일만 업로드할 수 있습니다."}), 400

    storage_service = current_app.services['storage']
    try:
        image_url = storage_service.upload_journal_image(user_id, file)
    except Exception as e:
        logging.error(f"관측 사진 업로드 중 서버 오류 발생 (user: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": "사진 업로드 중 오류가 발생했습니다."}), 502
    return jsonify({"imageUrl": image_url}), 201


@uploads_bp.route('/url', methods=['POST'])
@jwt_required()
def get_upload_url():
    """
    클라이언트가 Storage에 직접 업로드할 수 있는 Pre-signed URL을 발급합니다.
    업로드가 끝나면 응답의 public_url을 imageUrl로 사용합니다.
    """
    user_id = get_jwt_identity()
    try:
        data = UploadUrlRequestSchema().load(request.get_json() or {})
    except ValidationError as err:
        logging.warning(f"URL 발급 요청 실패 (잘못된 파라미터): {err.messages}")
        return jsonify({"error_code": "INVALID_PARAMETERS", "details": err.messages}), 400

    storage_service = current_app.services['storage']
    try:
        url_info = storage_service.generate_upload_url(user_id, data['upload_type'], data['filename'], data['content_type'])
        return jsonify(url_info), 200
    except ValueError as e:
        logging.warning(f"URL 발급 요청 실패 (잘못된 업로드 타입): {e}")
        return jsonify({"error_code": "INVALID_UPLOAD_TYPE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Pre-signed URL 생성 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "URL_GENERATION_FAILED", "message": "URL 생성 중 서버 오류가 발생했습니다."}), 500
