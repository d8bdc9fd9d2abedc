"""Content brief service: metered generation and the owner's brief library."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional, cast
from uuid import UUID

import orjson
import structlog

from core.exceptions import BriefNotFoundError, GenerationFailedError, ValidationError
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.brief import CONTENT_TYPES, ContentBrief
from domain.entities.project import ProjectRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_project, require_role
from domain.services.quota_service import IContentGenerator, QuotaService

logger = structlog.get_logger()

BRIEF_TITLE_MAX_LENGTH = 200
TOPIC_MAX_LENGTH = 200

_LIST_FIELDS = ("content_outline", "key_points", "target_keywords", "seo_tips")
_TEXT_FIELDS = ("target_audience", "tone_style", "word_count")

_UNSET = object()


def brief_prompt(topic: str, industry: str | None, content_type: str) -> str:
    return f"{topic} in {industry or 'general'} industry for {content_type}"


def _required_text(value: str, field: str, max_length: int) -> str:
    value = value.strip()
    if not value or len(value) > max_length:
        raise ValidationError(
            f"{field.capitalize()} must be 1-{max_length} characters", field=field
        )
    return value


def parse_generated_brief(raw: str) -> dict[str, Any]:
    """Decode generator output into brief fields.

    The generator must return a JSON object with a non-empty ``title``.
    List fields must hold strings; unknown keys are ignored.
    """
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise GenerationFailedError("Generator returned malformed brief") from exc
    if not isinstance(payload, dict):
        raise GenerationFailedError("Generator returned malformed brief")

    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        raise GenerationFailedError("Generated brief has no title")

    fields: dict[str, Any] = {"title": title.strip()[:BRIEF_TITLE_MAX_LENGTH]}
    for name in _TEXT_FIELDS:
        value = payload.get(name, "")
        if not isinstance(value, str):
            raise GenerationFailedError(f"Generated brief has invalid {name}")
        fields[name] = value
    for name in _LIST_FIELDS:
        values = payload.get(name, [])
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise GenerationFailedError(f"Generated brief has invalid {name}")
        fields[name] = values
    return fields


class BriefService:
    """Service layer for content briefs.

    A brief is private to its author. Filing it under a project requires
    Editor+ there and announces it in the project's activity feed.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        quota_service: QuotaService,
        generator: IContentGenerator,
        activity_service: Optional["ActivityService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._quota = quota_service
        self._generator = generator
        self._activity = activity_service

    async def generate(
        self,
        user_id: UUID,
        topic: str,
        industry: str | None = None,
        content_type: str = "blog-post",
        project_id: UUID | None = None,
        idempotency_key: str | None = None,
    ) -> ContentBrief:
        """Generate a brief for a topic and save it. Costs one quota unit.

        Nothing is consumed when the generator fails or its output is unusable.

        Raises:
            ValidationError: If the topic or content type is invalid.
            ProjectNotFoundError: If ``project_id`` names no project.
            NotAMemberError: If the user is not a member of that project.
            InsufficientPermissionsError: If the user is below Editor there.
            QuotaExceededError: If the user's monthly quota is used up.
            GenerationFailedError: If the generator output is unusable.
        """
        topic = _required_text(topic, "topic", TOPIC_MAX_LENGTH)
        if content_type not in CONTENT_TYPES:
            raise ValidationError(f"Unknown content type '{content_type}'", field="content_type")
        if project_id:
            await self._require_editor(project_id, user_id)

        async def _generate_and_save() -> ContentBrief:
            raw = await self._generator.generate(
                brief_prompt(topic, industry, content_type),
                kind="brief",
                topic=topic,
                content_type=content_type,
            )
            brief = ContentBrief(
                user_id=user_id,
                project_id=project_id,
                topic=topic,
                **parse_generated_brief(raw),
            )
            async with self._uow_factory() as uow:
                created = await uow.briefs.create(brief)
                await uow.commit()
            return created  # type: ignore[no-any-return]

        created = await self._quota.run_metered(user_id, _generate_and_save, idempotency_key)
        logger.info(
            "brief_generated",
            user_id=str(user_id),
            brief_id=str(created.id),
            content_type=content_type,
        )
        await self._record_created(created)
        return created

    async def create(
        self,
        user_id: UUID,
        title: str,
        topic: str,
        project_id: UUID | None = None,
        target_audience: str = "",
        content_outline: list[str] | None = None,
        key_points: list[str] | None = None,
        tone_style: str = "",
        word_count: str = "",
        target_keywords: list[str] | None = None,
        seo_tips: list[str] | None = None,
    ) -> ContentBrief:
        """Save a brief written by hand. Does not touch the quota."""
        brief = ContentBrief(
            user_id=user_id,
            project_id=project_id,
            title=_required_text(title, "title", BRIEF_TITLE_MAX_LENGTH),
            topic=_required_text(topic, "topic", TOPIC_MAX_LENGTH),
            target_audience=target_audience,
            content_outline=list(content_outline or []),
            key_points=list(key_points or []),
            tone_style=tone_style,
            word_count=word_count,
            target_keywords=list(target_keywords or []),
            seo_tips=list(seo_tips or []),
        )

        async with self._uow_factory() as uow:
            if project_id:
                await require_project(uow, project_id)
                await require_role(uow, project_id, user_id, ProjectRole.EDITOR)
            created = await uow.briefs.create(brief)
            await uow.commit()

        await self._record_created(created)
        return created  # type: ignore[no-any-return]

    @retry_transient()
    async def list_for_user(self, user_id: UUID) -> list[ContentBrief]:
        """The user's briefs, most recently updated first."""
        async with self._uow_factory() as uow:
            return await uow.briefs.get_for_user(user_id)  # type: ignore[no-any-return]

    @retry_transient()
    async def get(self, brief_id: UUID, user_id: UUID) -> ContentBrief:
        async with self._uow_factory() as uow:
            return await self._require_own(uow, brief_id, user_id)

    async def update(
        self,
        brief_id: UUID,
        user_id: UUID,
        project_id: object = _UNSET,
        **changes: Any,
    ) -> ContentBrief:
        """Apply a partial update to one of the user's briefs.

        ``changes`` may name any text or list field of the brief plus
        ``title`` and ``topic``. ``project_id`` may be cleared with None;
        moving a brief into a project requires Editor+ there.
        """
        unknown = set(changes) - {"title", "topic", *_TEXT_FIELDS, *_LIST_FIELDS}
        if unknown:
            raise ValidationError(f"Unknown brief field '{sorted(unknown)[0]}'")

        async with self._uow_factory() as uow:
            brief = await self._require_own(uow, brief_id, user_id)

            if project_id is not _UNSET and project_id != brief.project_id:
                target = cast(UUID | None, project_id)
                if target is not None:
                    await require_project(uow, target)
                    await require_role(uow, target, user_id, ProjectRole.EDITOR)
                brief.project_id = target

            if "title" in changes:
                brief.title = _required_text(changes.pop("title"), "title", BRIEF_TITLE_MAX_LENGTH)
            if "topic" in changes:
                brief.topic = _required_text(changes.pop("topic"), "topic", TOPIC_MAX_LENGTH)
            for name, value in changes.items():
                setattr(brief, name, list(value) if name in _LIST_FIELDS else value)

            brief.updated_at = datetime.utcnow()
            updated = await uow.briefs.update(brief)
            await uow.commit()

        return updated  # type: ignore[no-any-return]

    async def delete(self, brief_id: UUID, user_id: UUID) -> bool:
        async with self._uow_factory() as uow:
            await self._require_own(uow, brief_id, user_id)
            deleted = await uow.briefs.delete(brief_id)
            await uow.commit()

        logger.info("brief_deleted", user_id=str(user_id), brief_id=str(brief_id))
        return deleted  # type: ignore[no-any-return]

    # --- Internal helpers ---

    async def _require_own(
        self, uow: IUnitOfWork, brief_id: UUID, user_id: UUID
    ) -> ContentBrief:
        """Load a brief, hiding other users' briefs behind a not-found."""
        brief = await uow.briefs.get(brief_id)
        if not brief or not brief.is_owned_by(user_id):
            raise BriefNotFoundError(str(brief_id))
        return brief

    async def _require_editor(self, project_id: UUID, user_id: UUID) -> None:
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.EDITOR)

    async def _record_created(self, brief: ContentBrief) -> None:
        if self._activity and brief.project_id:
            await self._activity.record(
                project_id=brief.project_id,
                actor_id=brief.user_id,
                action=Actions.CREATED,
                resource_type=ResourceTypes.CONTENT_BRIEF,
                resource_id=brief.id,
                metadata={"title": brief.title},
            )
