"""
Сервис приложения для комментариев к оборудованию.
"""

from typing import Callable, List, Optional

from ...domain import (
    Actor,
    EquipmentComment,
    PermissionService,
    create_equipment_comment,
)
from ...shared_kernel import DomainException, EntityId, Ok, Result, generate_id, now
from ..dto import CommentView
from ..interfaces import ILogger
from ..repositories import EquipmentCommentRepository, EquipmentRepository, UserRepository
from .base import authorize, load_users, require_actor, require_found


class CommentApplicationService:
    def __init__(
        self,
        comments: EquipmentCommentRepository,
        equipment: EquipmentRepository,
        users: UserRepository,
        logger: ILogger,
        id_factory: Callable[[], EntityId] = generate_id,
        clock=now,
    ):
        self._comments = comments
        self._equipment = equipment
        self._users = users
        self._logger = logger
        self._new_id = id_factory
        self._clock = clock

    def list_comments(
        self, equipment_id: EntityId
    ) -> Result[List[CommentView], DomainException]:
        """Комментарии к оборудованию в порядке публикации."""
        comments = self._comments.find_by_equipment_id(equipment_id)
        if comments.is_err():
            return comments
        ordered = sorted(comments.value, key=lambda c: c.created_at)

        authors = load_users(self._users, [c.user_id for c in ordered])
        if authors.is_err():
            return authors
        return Ok(
            [
                CommentView.from_domain(comment, author=authors.value.get(comment.user_id))
                for comment in ordered
            ]
        )

    def create_comment(
        self, actor: Optional[Actor], equipment_id: EntityId, content: str
    ) -> Result[EquipmentComment, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result

        comment = create_equipment_comment(
            self._new_id(), equipment_id, actor.id, content, self._clock()
        )
        if comment.is_err():
            return comment
        allowed = authorize(PermissionService.can_comment())
        if allowed.is_err():
            return allowed

        equipment = require_found(
            self._equipment.find_by_id(equipment_id), "Equipment not found"
        )
        if equipment.is_err():
            return equipment
        return self._comments.save(comment.value)

    def delete_comment(
        self, actor: Optional[Actor], comment_id: EntityId
    ) -> Result[None, DomainException]:
        """Удалить комментарий может автор или ADMIN."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = require_found(
            self._comments.find_by_id(comment_id), "Comment not found"
        )
        if existing.is_err():
            return existing

        allowed = authorize(
            PermissionService.can_delete_comment(actor, existing.value),
            detail="You can only delete your own comments",
        )
        if allowed.is_err():
            self._logger.warning(
                "Comment delete denied", actor_id=actor.id, comment_id=comment_id
            )
            return allowed

        deleted = self._comments.delete(comment_id)
        if deleted.is_ok():
            self._logger.info("Comment deleted", comment_id=comment_id)
        return deleted
