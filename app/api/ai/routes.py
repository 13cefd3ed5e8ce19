# app/api/ai/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required

from app.api.ai.schemas import EnhanceRequestSchema, LocationInfoRequestSchema
from app.core.errors import ValidationFailure

ai_bp = Blueprint('ai_bp', __name__)

@ai_bp.route('/enhance', methods=['POST'])
@jwt_required()
def enhance_note():
    """
    관측 노트를 AI로 다듬습니다.
    AI를 사용할 수 없거나 실패하면 원본 노트를 그대로 돌려주며, enhanced 값으로 구분합니다.
    """
    data = EnhanceRequestSchema().load(request.get_json() or {})
    text, target = data['text'], data['target']
    if not text.strip() or not target.strip():
        raise ValidationFailure("관측 대상과 노트 내용을 먼저 입력해주세요.")

    openai_service = current_app.services['openai']
    result = openai_service.enhance_journal_entry(text, target)
    return jsonify({"text": result, "enhanced": result != text}), 200


@ai_bp.route('/location-info', methods=['POST'])
def location_info():
    """관측지에 대한 천문/지리 정보와 출처 링크를 조회합니다. 생성에 실패하면 info는 null입니다."""
    data = LocationInfoRequestSchema().load(request.get_json() or {})
    openai_service = current_app.services['openai']
    info = openai_service.get_location_info(data['location'], data['lat'], data['lng'])
    return jsonify({"info": info}), 200
