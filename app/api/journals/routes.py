# app/api/journals/routes.py
from flask import Blueprint, request, jsonify, current_app, Response

from app.api.journals.schemas import JournalCreateSchema, JournalUpdateSchema, JournalResponseSchema
from app.core.session import current_session
from app.utils.request_utils import is_confirmed

journals_bp = Blueprint('journals_bp', __name__)

@journals_bp.route('', methods=['GET'])
def get_feed():
    """
    관측 일지 피드를 조회합니다. (로그인 선택)
    - 로그인 사용자는 팔로우한 사람의 일지가 먼저, 그 안에서는 최신순으로 정렬됩니다.
    - ?entry=<id> 딥 링크가 있으면 해당 일지를 selected로 함께 반환합니다. (없으면 null)
    """
    journal_service = current_app.services['journals']
    feed_composer = current_app.services['feed']
    session = current_session()

    version, entries = journal_service.current_snapshot()
    following = session.following if session.is_authenticated else None
    feed = feed_composer.compose(version, entries, following)
    selected = journal_service.find_in(entries, request.args.get('entry'))

    schema = JournalResponseSchema()
    return jsonify({
        "entries": schema.dump(feed, many=True),
        "selected": schema.dump(selected) if selected else None,
    }), 200


@journals_bp.route('', methods=['POST'])
def create_journal():
    """새 관측 일지를 작성합니다. 장비/관측지를 비워두면 프로필의 기본값이 사용됩니다."""
    journal_service = current_app.services['journals']
    session = current_session()
    viewer = session.require_viewer()

    data = JournalCreateSchema().load(request.get_json() or {})
    entry = journal_service.create_entry(viewer, data, profile=session.profile)
    return jsonify(JournalResponseSchema().dump(entry)), 201


@journals_bp.route('/map', methods=['GET'])
def get_map_markers():
    """좌표가 있는 관측 일지를 지도 마커와 표시 범위로 반환합니다."""
    journal_service = current_app.services['journals']
    return jsonify(journal_service.map_markers()), 200


@journals_bp.route('/<string:entry_id>', methods=['GET'])
def get_journal(entry_id: str):
    journal_service = current_app.services['journals']
    entry = journal_service.get_entry(entry_id)
    return jsonify(JournalResponseSchema().dump(entry)), 200


@journals_bp.route('/<string:entry_id>', methods=['PATCH'])
def update_journal(entry_id: str):
    """관측 일지를 수정합니다. (작성자 본인만 가능)"""
    journal_service = current_app.services['journals']
    viewer = current_session().require_viewer()

    data = JournalUpdateSchema().load(request.get_json() or {})
    if not data:
        return jsonify({"error_code": "NO_DATA", "message": "수정할 데이터가 없습니다."}), 400
    entry = journal_service.update_entry(viewer, entry_id, data)
    return jsonify(JournalResponseSchema().dump(entry)), 200


@journals_bp.route('/<string:entry_id>', methods=['DELETE'])
def delete_journal(entry_id: str):
    """
    관측 일지를 삭제합니다. (작성자 본인만 가능)
    되돌릴 수 없으므로 ?confirm=true 가 필요합니다.
    """
    journal_service = current_app.services['journals']
    viewer = current_session().require_viewer()
    journal_service.delete_entry(viewer, entry_id, confirmed=is_confirmed())
    return Response(status=204)


@journals_bp.route('/<string:entry_id>/share', methods=['GET'])
def get_share_payload(entry_id: str):
    """공유하기에 사용할 제목/본문/딥 링크를 반환합니다."""
    journal_service = current_app.services['journals']
    return jsonify(journal_service.share_payload(entry_id)), 200
