"""SQLAlchemy implementation of Project repository."""

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.project import MembershipStatus, Project, ProjectMember, ProjectRole
from infrastructure.database.models import (
    ActivityLogModel,
    ArticleCommentModel,
    ArticleModel,
    ContentBriefModel,
    InvitationModel,
    ProjectMemberModel,
    ProjectModel,
)


class SQLAlchemyProjectRepository:
    """SQLAlchemy implementation of IProjectRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Project | None:
        """Get a project by ID."""
        stmt = select(ProjectModel).where(ProjectModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[Project]:
        """Get all projects a user actively belongs to, newest first."""
        stmt = (
            select(ProjectModel)
            .join(ProjectMemberModel, ProjectMemberModel.project_id == ProjectModel.id)
            .where(
                ProjectMemberModel.user_id == user_id,
                ProjectMemberModel.status == MembershipStatus.ACTIVE.value,
            )
            .order_by(ProjectModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the projects a user actively belongs to."""
        stmt = (
            select(func.count())
            .select_from(ProjectMemberModel)
            .where(
                ProjectMemberModel.user_id == user_id,
                ProjectMemberModel.status == MembershipStatus.ACTIVE.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, project: Project) -> Project:
        """Create a new project."""
        model = self._to_model(project)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, project: Project) -> Project:
        """Update an existing project."""
        stmt = select(ProjectModel).where(ProjectModel.id == project.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Project {project.id} not found")

        model.title = project.title
        model.description = project.description
        model.updated_at = project.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a project together with everything that belongs to it.

        Dependents are removed with explicit statements so the result does
        not depend on the database enforcing ON DELETE CASCADE. Content briefs
        filed under the project survive, detached from it.
        """
        found = await self._session.scalar(select(ProjectModel.id).where(ProjectModel.id == id))
        if found is None:
            return False

        article_ids = select(ArticleModel.id).where(ArticleModel.project_id == id)
        await self._session.execute(
            delete(ArticleCommentModel).where(ArticleCommentModel.article_id.in_(article_ids))
        )
        await self._session.execute(delete(ArticleModel).where(ArticleModel.project_id == id))
        await self._session.execute(
            update(ContentBriefModel)
            .where(ContentBriefModel.project_id == id)
            .values(project_id=None)
        )
        await self._session.execute(delete(InvitationModel).where(InvitationModel.project_id == id))
        await self._session.execute(
            delete(ActivityLogModel).where(ActivityLogModel.project_id == id)
        )
        await self._session.execute(
            delete(ProjectMemberModel).where(ProjectMemberModel.project_id == id)
        )
        await self._session.execute(delete(ProjectModel).where(ProjectModel.id == id))
        await self._session.flush()
        return True

    async def get_member(self, project_id: UUID, user_id: UUID) -> ProjectMember | None:
        """Get a membership row regardless of status."""
        stmt = select(ProjectMemberModel).where(
            ProjectMemberModel.project_id == project_id,
            ProjectMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_active_members(self, project_id: UUID) -> list[ProjectMember]:
        """Get active members ordered by joined_at, then by insertion order."""
        stmt = (
            select(ProjectMemberModel)
            .where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.status == MembershipStatus.ACTIVE.value,
            )
            .order_by(ProjectMemberModel.joined_at, ProjectMemberModel.seq)
        )
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def add_member(self, member: ProjectMember) -> ProjectMember:
        """Insert a membership row."""
        model = self._member_to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._member_to_entity(model)

    async def update_member(self, member: ProjectMember) -> ProjectMember:
        """Persist role, status and timestamps of an existing membership row."""
        stmt = select(ProjectMemberModel).where(
            ProjectMemberModel.project_id == member.project_id,
            ProjectMemberModel.user_id == member.user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError("Member not found in project")

        model.role = member.role.label
        model.status = member.status.value
        model.invited_by = member.invited_by
        model.joined_at = member.joined_at
        model.updated_at = member.updated_at
        await self._session.flush()
        return self._member_to_entity(model)

    async def count_active_owners(self, project_id: UUID) -> int:
        """Count active owner memberships of a project."""
        stmt = (
            select(func.count())
            .select_from(ProjectMemberModel)
            .where(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.role == ProjectRole.OWNER.label,
                ProjectMemberModel.status == MembershipStatus.ACTIVE.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: ProjectModel) -> Project:
        """Convert ORM model to domain entity."""
        return Project(
            id=model.id,
            title=model.title,
            description=model.description,
            owner_id=model.owner_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Project) -> ProjectModel:
        """Convert domain entity to ORM model."""
        return ProjectModel(
            id=entity.id,
            title=entity.title,
            description=entity.description,
            owner_id=entity.owner_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _member_to_entity(self, model: ProjectMemberModel) -> ProjectMember:
        """Convert member ORM model to domain entity."""
        return ProjectMember(
            project_id=model.project_id,
            user_id=model.user_id,
            role=ProjectRole.from_label(model.role),
            status=MembershipStatus(model.status),
            invited_by=model.invited_by,
            joined_at=model.joined_at,
            updated_at=model.updated_at,
        )

    def _member_to_model(self, entity: ProjectMember) -> ProjectMemberModel:
        """Convert member domain entity to ORM model."""
        return ProjectMemberModel(
            project_id=entity.project_id,
            user_id=entity.user_id,
            role=entity.role.label,
            status=entity.status.value,
            invited_by=entity.invited_by,
            joined_at=entity.joined_at,
            updated_at=entity.updated_at,
        )
