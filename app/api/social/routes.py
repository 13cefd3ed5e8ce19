# app/api/social/routes.py
from flask import Blueprint, request, jsonify, current_app

from app.api.journals.schemas import CommentCreateSchema, CommentResponseSchema
from app.core.session import current_session
from app.utils.request_utils import is_confirmed

social_bp = Blueprint('social_bp', __name__)

# --- 좋아요 ---
@social_bp.route('/journals/<string:entry_id>/like', methods=['POST'])
def toggle_like(entry_id: str):
    """
    관측 일지의 좋아요를 누르거나 취소합니다.
    변경된 상태는 다음 피드 조회(저장소 스냅샷)에 반영됩니다.
    """
    social_service = current_app.services['social']
    viewer = current_session().viewer
    action = social_service.toggle_like(entry_id, viewer)
    return jsonify({"action": action}), 200


# --- 댓글 ---
@social_bp.route('/journals/<string:entry_id>/comments', methods=['POST'])
def create_comment(entry_id: str):
    social_service = current_app.services['social']
    viewer = current_session().viewer
    data = CommentCreateSchema().load(request.get_json() or {})
    comment = social_service.submit_comment(entry_id, viewer, data['text'])
    return jsonify(CommentResponseSchema().dump(comment)), 201


@social_bp.route('/journals/<string:entry_id>/comments/<string:comment_id>', methods=['PATCH'])
def edit_comment(entry_id: str, comment_id: str):
    """댓글 내용을 수정합니다. (작성자 본인만 가능)"""
    social_service = current_app.services['social']
    viewer = current_session().viewer
    data = CommentCreateSchema().load(request.get_json() or {})
    comments = social_service.edit_comment(entry_id, comment_id, viewer, data['text'])
    return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200


@social_bp.route('/journals/<string:entry_id>/comments/<string:comment_id>', methods=['DELETE'])
def delete_comment(entry_id: str, comment_id: str):
    """댓글을 삭제합니다. (작성자 본인만, ?confirm=true 필요)"""
    social_service = current_app.services['social']
    viewer = current_session().viewer
    comments = social_service.delete_comment(entry_id, comment_id, viewer, confirmed=is_confirmed())
    return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200


# --- 팔로우 ---
@social_bp.route('/users/<string:target_uid>/follow', methods=['POST'])
def follow_user(target_uid: str):
    social_service = current_app.services['social']
    social_service.follow(target_uid, current_session().viewer)
    return jsonify({"action": "followed"}), 200


@social_bp.route('/users/<string:target_uid>/follow', methods=['DELETE'])
def unfollow_user(target_uid: str):
    social_service = current_app.services['social']
    social_service.unfollow(target_uid, current_session().viewer)
    return jsonify({"action": "unfollowed"}), 200


@social_bp.route('/users/<string:target_uid>/follow/toggle', methods=['POST'])
def toggle_follow(target_uid: str):
    """현재 세션의 팔로우 목록을 기준으로 팔로우/언팔로우를 전환합니다."""
    social_service = current_app.services['social']
    session = current_session()
    action = social_service.toggle_follow(target_uid, session.viewer, target_uid in session.following)
    return jsonify({"action": action}), 200
