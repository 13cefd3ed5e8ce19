# app/api/social/services.py
import logging
import uuid
from typing import Optional, List, Dict, Any

from firebase_admin import firestore

from app.core.errors import AuthRequired, NotFound, PermissionDenied, ValidationFailure, ConfirmationRequired
from app.core.session import Viewer
from app.models.journal import Comment, JournalEntry
from app.services.firestore_service import store_write
from app.utils.datetime_utils import DateTimeUtils

DEFAULT_COMMENTER_NAME = '익명의 대원'


class SocialService:
    """
    좋아요/팔로우/댓글 동작을 Firestore 문서 변경으로 옮기는 서비스 클래스.

    - likes, followers, following은 배열이지만 집합으로 취급하며, 항상 ArrayUnion/ArrayRemove로
      변경합니다. 여러 사용자가 동시에 눌러도 서로 덮어쓰지 않고, 같은 요청이 재시도되어도 결과가 같습니다.
    - 댓글 추가도 ArrayUnion으로 각각 독립적으로 추가됩니다.
    - 변경 결과를 직접 반환하지 않습니다. 화면은 저장소의 다음 스냅샷으로 갱신됩니다.
    """

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.journals_ref = self.db.collection('journals')
        self.users_ref = self.db.collection('users')

    @staticmethod
    def _require_viewer(viewer: Optional[Viewer]) -> Viewer:
        if viewer is None:
            raise AuthRequired()
        return viewer

    def _get_entry(self, entry_id: str) -> JournalEntry:
        if not entry_id:
            raise NotFound("관측 일지를 찾을 수 없습니다.")
        doc = self.journals_ref.document(entry_id).get()
        if not doc.exists:
            raise NotFound("관측 일지를 찾을 수 없습니다.")
        return JournalEntry.from_dict(doc.to_dict(), doc_id=doc.id)

    # --- 좋아요 ---
    def toggle_like(self, entry_id: str, viewer: Optional[Viewer]) -> str:
        """
        이미 좋아요를 눌렀으면 취소하고, 아니면 추가합니다.

        :return: 'liked' 또는 'unliked' (요청한 동작. 실제 상태는 다음 스냅샷에서 확인)
        """
        viewer = self._require_viewer(viewer)
        entry = self._get_entry(entry_id)
        entry_ref = self.journals_ref.document(entry_id)

        if viewer.uid in entry.likes:
            with store_write("좋아요 취소"):
                entry_ref.update({'likes': firestore.ArrayRemove([viewer.uid])})
            return 'unliked'

        with store_write("좋아요"):
            entry_ref.update({'likes': firestore.ArrayUnion([viewer.uid])})
        return 'liked'

    # --- 팔로우 ---
    def follow(self, target_uid: str, viewer: Optional[Viewer]) -> None:
        """
        내 following에 대상을 추가하고(주요 쓰기), 대상의 followers에 나를 추가합니다(부가 쓰기).
        부가 쓰기는 다른 사용자의 문서를 수정하므로 보안 규칙에 막힐 수 있으며,
        실패해도 경고만 남기고 주요 쓰기를 되돌리지 않습니다. followers 수는 참고용입니다.
        """
        viewer = self._check_follow_target(target_uid, viewer)
        with store_write("팔로우"):
            self.users_ref.document(viewer.uid).update({'following': firestore.ArrayUnion([target_uid])})
        self._update_followers_best_effort(target_uid, firestore.ArrayUnion([viewer.uid]))
        logging.info(f"팔로우: {viewer.uid} -> {target_uid}")

    def unfollow(self, target_uid: str, viewer: Optional[Viewer]) -> None:
        """follow의 반대 동작. 부가 쓰기(대상의 followers) 실패는 기록만 합니다."""
        viewer = self._check_follow_target(target_uid, viewer)
        with store_write("언팔로우"):
            self.users_ref.document(viewer.uid).update({'following': firestore.ArrayRemove([target_uid])})
        self._update_followers_best_effort(target_uid, firestore.ArrayRemove([viewer.uid]))
        logging.info(f"언팔로우: {viewer.uid} -> {target_uid}")

    def toggle_follow(self, target_uid: str, viewer: Optional[Viewer], currently_following: bool) -> str:
        """세션의 following 집합 기준으로 팔로우/언팔로우를 전환합니다."""
        if currently_following:
            self.unfollow(target_uid, viewer)
            return 'unfollowed'
        self.follow(target_uid, viewer)
        return 'followed'

    def _check_follow_target(self, target_uid: str, viewer: Optional[Viewer]) -> Viewer:
        viewer = self._require_viewer(viewer)
        if not target_uid:
            raise ValidationFailure("팔로우할 사용자를 지정해주세요.")
        if target_uid == viewer.uid:
            raise ValidationFailure("자기 자신은 팔로우할 수 없습니다.")
        return viewer

    def _update_followers_best_effort(self, target_uid: str, transform) -> None:
        try:
            self.users_ref.document(target_uid).update({'followers': transform})
        except Exception as e:
            logging.warning(f"대상 사용자의 팔로워 목록을 갱신하지 못했습니다 (target: {target_uid}, 권한 거부?): {e}")

    # --- 댓글 ---
    def submit_comment(self, entry_id: str, viewer: Optional[Viewer], text: str) -> Comment:
        """
        댓글을 추가합니다. 공백뿐인 댓글은 저장소 호출 전에 거부됩니다.
        작성자 이름은 현재 닉네임의 스냅샷으로 저장됩니다.
        """
        viewer = self._require_viewer(viewer)
        if not text or not text.strip():
            raise ValidationFailure("댓글 내용을 입력해주세요.")
        self._get_entry(entry_id)

        comment = Comment(
            id=str(uuid.uuid1()),  # 시간 기반 고유 ID
            user_id=viewer.uid,
            user_name=viewer.display_name or DEFAULT_COMMENTER_NAME,
            text=text,
            created_at=DateTimeUtils.now_ms(),
        )
        with store_write("댓글 작성"):
            self.journals_ref.document(entry_id).update({'comments': firestore.ArrayUnion([comment.to_dict()])})
        return comment

    def edit_comment(self, entry_id: str, comment_id: str, viewer: Optional[Viewer], new_text: str) -> List[Comment]:
        """
        댓글 작성자 본인만 내용을 수정할 수 있습니다.
        대상 댓글의 text만 바뀌고 다른 댓글은 저장된 그대로(필드/순서) 유지됩니다.
        """
        viewer = self._require_viewer(viewer)
        if not new_text or not new_text.strip():
            raise ValidationFailure("댓글 내용을 입력해주세요.")

        raw_comments = self._load_raw_comments(entry_id)
        self._check_comment_owner(raw_comments, comment_id, viewer)
        updated = [dict(c, text=new_text) if c.get('id') == comment_id else c for c in raw_comments]
        self._replace_comments(entry_id, updated, "댓글 수정")
        return [Comment.from_dict(c) for c in updated]

    def delete_comment(self, entry_id: str, comment_id: str, viewer: Optional[Viewer], confirmed: bool = False) -> List[Comment]:
        """댓글 작성자 본인만 삭제할 수 있으며, confirmed=True가 필요합니다."""
        viewer = self._require_viewer(viewer)
        raw_comments = self._load_raw_comments(entry_id)
        self._check_comment_owner(raw_comments, comment_id, viewer)
        if not confirmed:
            raise ConfirmationRequired("정말로 이 댓글을 삭제하려면 확인이 필요합니다.")

        updated = [c for c in raw_comments if c.get('id') != comment_id]
        self._replace_comments(entry_id, updated, "댓글 삭제")
        return [Comment.from_dict(c) for c in updated]

    def _load_raw_comments(self, entry_id: str) -> List[Dict[str, Any]]:
        """저장된 comments 배열을 변환 없이 그대로 읽습니다."""
        if not entry_id:
            raise NotFound("관측 일지를 찾을 수 없습니다.")
        doc = self.journals_ref.document(entry_id).get()
        if not doc.exists:
            raise NotFound("관측 일지를 찾을 수 없습니다.")
        return list(doc.to_dict().get('comments') or [])

    @staticmethod
    def _check_comment_owner(raw_comments: List[Dict[str, Any]], comment_id: str, viewer: Viewer) -> None:
        target = next((c for c in raw_comments if c.get('id') == comment_id), None)
        if target is None:
            raise NotFound("댓글을 찾을 수 없습니다.")
        if Comment.from_dict(target).user_id != viewer.uid:
            raise PermissionDenied("본인이 작성한 댓글만 수정하거나 삭제할 수 있습니다.")

    def _replace_comments(self, entry_id: str, raw_comments: List[Dict[str, Any]], description: str) -> None:
        # 배열 안의 특정 항목만 원자적으로 바꿀 수 없어 comments 필드 전체를 덮어씁니다.
        # 읽은 뒤 쓰기 전까지 다른 사용자가 댓글을 추가/수정/삭제하면 그 변경은 사라집니다 (마지막 쓰기 우선).
        with store_write(description):
            self.journals_ref.document(entry_id).update({'comments': raw_comments})
