# surfspot/api/comments/services.py

import logging
import uuid
from typing import Optional, Dict, Any, List

from firebase_admin import firestore

from surfspot.api.comments.rules import (
    prepare_comment_write,
    prepare_comment_edit,
    validate_comment,
    can_modify_comment,
)
from surfspot.api.comments.schemas import CommentUpdateSchema
from surfspot.api.users.services import UserService
from surfspot.models.comment import Comment
from surfspot.utils.datetime_utils import DateTimeUtils

class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글은 부모 ID로 연결되는 2단계 트리(최상위 + 답글)를 이룹니다.
    - 스팟 문서의 comments 목록은 댓글 생성/삭제 시 같은 WriteBatch 안에서 갱신됩니다.
    """
    def __init__(self, db, user_service: UserService):
        self.db = db
        self.comments_ref = self.db.collection('comments')
        self.spots_ref = self.db.collection('spots')
        self.user_service = user_service

    def _get_comment(self, comment_id: str) -> Optional[Comment]:
        doc = self.comments_ref.document(comment_id).get()
        if not doc.exists:
            return None
        return Comment.from_dict(doc.to_dict())

    def _to_response(self, comments: List[Comment]) -> List[Dict[str, Any]]:
        return self.user_service.populate([comment.to_dict() for comment in comments])

    def list_comments(self) -> List[Dict[str, Any]]:
        """모든 댓글을 작성자 정보와 함께 조회합니다."""
        comments = [Comment.from_dict(doc.to_dict()) for doc in self.comments_ref.stream()]
        return self._to_response(comments)

    def get_comments_for_spot(self, spot_id: str) -> List[Dict[str, Any]]:
        """특정 스팟의 댓글(답글 포함)을 최신순으로 조회합니다."""
        docs = self.comments_ref.where('spot_id', '==', spot_id).stream()
        comments = [Comment.from_dict(doc.to_dict()) for doc in docs]
        comments.sort(key=lambda comment: comment.created_at, reverse=True)
        return self._to_response(comments)

    def get_comment(self, comment_id: str) -> Optional[Dict[str, Any]]:
        comment = self._get_comment(comment_id)
        if not comment:
            return None
        return self._to_response([comment])[0]

    def create_comment(self, author_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        새로운 댓글 또는 답글을 생성하고 스팟의 댓글 목록에 ID를 추가합니다.
        - 답글은 부모 댓글이 존재해야 하며(없으면 ValueError), 스팟은 부모에서 물려받습니다.
        - 규칙 위반은 marshmallow ValidationError로 전달됩니다.
        """
        parent = None
        parent_id = data.get('parent_id')
        if parent_id:
            parent = self._get_comment(parent_id)
            if not parent:
                raise ValueError("Parent comment not found")

        fields = prepare_comment_write(data, parent)

        spot_ref = self.spots_ref.document(fields['spot_id'])
        if not spot_ref.get().exists:
            raise ValueError("Surf spot not found")

        comment = validate_comment(Comment(comment_id=str(uuid.uuid4()), user_id=author_id, **fields))

        batch = self.db.batch()
        batch.set(self.comments_ref.document(comment.comment_id), DateTimeUtils.for_firestore(comment.to_dict()))
        batch.update(spot_ref, {'comments': firestore.ArrayUnion([comment.comment_id])})
        batch.commit()

        logging.info(f"댓글 생성 완료 (comment_id: {comment.comment_id}, spot_id: {comment.spot_id}, reply: {comment.is_reply})")
        return self._to_response([comment])[0]

    def update_comment(self, comment_id: str, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        """
        댓글 텍스트를 수정합니다. (작성자 본인 또는 admin만 가능)
        존재 여부(ValueError) -> 권한(PermissionError) -> 본문 검증(ValidationError) 순으로 확인합니다.
        """
        comment = self._get_comment(comment_id)
        if not comment:
            raise ValueError("Comment not found")
        if not can_modify_comment(comment, user):
            raise PermissionError("Not authorized to update this comment")

        text = CommentUpdateSchema().load(data)["text"]
        comment = prepare_comment_edit(comment, text)
        self.comments_ref.document(comment_id).update(DateTimeUtils.for_firestore({
            'text': comment.text,
            'edited': comment.edited,
            'updated_at': comment.updated_at,
        }))
        return self._to_response([comment])[0]

    def delete_comment(self, comment_id: str, user: Dict[str, Any]) -> None:
        """
        댓글을 삭제합니다. (작성자 본인 또는 admin만 가능)
        최상위 댓글이면 답글 삭제 -> 스팟 목록에서 ID 제거 -> 댓글 삭제 순으로 하나의 배치에 담아 커밋합니다.
        """
        comment = self._get_comment(comment_id)
        if not comment:
            raise ValueError("Comment not found")
        if not can_modify_comment(comment, user):
            raise PermissionError("Not authorized to delete this comment")

        batch = self.db.batch()
        reply_count = 0
        if not comment.is_reply:
            for reply_doc in self.comments_ref.where('parent_id', '==', comment_id).stream():
                batch.delete(reply_doc.reference)
                reply_count += 1

        spot_ref = self.spots_ref.document(comment.spot_id)
        if spot_ref.get().exists:
            batch.update(spot_ref, {'comments': firestore.ArrayRemove([comment_id])})

        batch.delete(self.comments_ref.document(comment_id))

        try:
            batch.commit()
        except Exception as e:
            logging.error(f"댓글 삭제 실패 (comment_id: {comment_id}): {e}", exc_info=True)
            raise
        logging.info(f"댓글 삭제 완료 (comment_id: {comment_id}, 함께 삭제된 답글 수: {reply_count})")

    def add_spot_comment_deletes(self, batch, spot_id: str) -> int:
        """스팟 삭제 배치에 해당 스팟의 모든 댓글 삭제를 추가하고, 추가된 개수를 반환합니다."""
        count = 0
        for doc in self.comments_ref.where('spot_id', '==', spot_id).stream():
            batch.delete(doc.reference)
            count += 1
        return count
