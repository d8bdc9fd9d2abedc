"""Invitation engine: issuing, accepting and withdrawing project invitations."""

import hashlib
import re
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AlreadyAMemberError,
    DuplicateInvitationError,
    InvitationAlreadyAcceptedError,
    InvitationEmailMismatchError,
    InvitationExpiredError,
    InvitationNotFoundError,
    ValidationError,
)
from core.retry import retry_transient
from domain.entities.activity import Actions, ResourceTypes
from domain.entities.invitation import (
    INVITATION_EXPIRY_DAYS,
    Invitation,
    InvitationStatus,
)
from domain.entities.project import MembershipStatus, ProjectMember, ProjectRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.authorization_service import require_project, require_role
from domain.services.membership_service import parse_assignable_role

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Lower-case and strip an email, raising ValidationError if malformed."""
    normalized = email.strip().lower()
    if len(normalized) > 255 or not EMAIL_PATTERN.match(normalized):
        raise ValidationError("Invalid email address", field="email")
    return normalized


class InvitationService:
    """Service layer for project invitation business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional["ActivityService"] = None,
        expiry_days: int = INVITATION_EXPIRY_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._expiry_days = expiry_days

    async def invite(
        self,
        actor_id: UUID,
        project_id: UUID,
        email: str,
        role: ProjectRole | str = ProjectRole.VIEWER,
    ) -> tuple[Invitation, str]:
        """Create a project invitation.

        Args:
            actor_id: The user creating the invitation (must be Admin+).
            project_id: The project to invite to.
            email: The email address to invite.
            role: The role to grant on acceptance (admin, editor or viewer).

        Returns:
            Tuple of (Invitation, raw_token). The raw_token is only available
            at creation time and should be shared with the invitee.

        Raises:
            ValidationError: If the email or role is invalid.
            ProjectNotFoundError: If the project does not exist.
            NotAMemberError: If the actor is not an active member.
            InsufficientPermissionsError: If the actor is not Admin+.
            AlreadyAMemberError: If the email belongs to an active member.
            DuplicateInvitationError: If a pending invitation already exists.
        """
        normalized = normalize_email(email)
        granted = parse_assignable_role(role)

        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, actor_id, ProjectRole.ADMIN)

            invitee = await uow.profiles.get_by_email(normalized)
            if invitee:
                member = await uow.projects.get_member(project_id, invitee.id)
                if member and member.is_active:
                    raise AlreadyAMemberError(str(invitee.id))

            existing = await uow.invitations.get_pending_for_project_email(project_id, normalized)
            if existing:
                if existing.is_pending:
                    raise DuplicateInvitationError(normalized)
                # Free the pending slot held by a stale offer
                await uow.invitations.update_status(existing.id, InvitationStatus.EXPIRED)

            raw_token = secrets.token_urlsafe(32)
            invitation = Invitation(
                project_id=project_id,
                email=normalized,
                role=granted,
                token_hash=self._hash_token(raw_token),
                invited_by=actor_id,
                expires_at=datetime.utcnow() + timedelta(days=self._expiry_days),
            )

            try:
                created = await uow.invitations.create(invitation)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Lost the race against a concurrent invite for the same address
                raise DuplicateInvitationError(normalized) from exc

        logger.info(
            "invitation_created",
            project_id=str(project_id),
            invitation_id=str(created.id),
            role=granted.label,
        )
        if self._activity:
            await self._activity.record(
                project_id=project_id,
                actor_id=actor_id,
                action=Actions.INVITED,
                resource_type=ResourceTypes.INVITATION,
                resource_id=created.id,
                metadata={"email": normalized, "role": granted.label},
            )
        return created, raw_token

    async def accept(
        self,
        invitation_id: UUID,
        user_id: UUID,
        user_email: str,
    ) -> ProjectMember:
        """Accept an invitation by its ID (in-app banner flow).

        Raises:
            InvitationNotFoundError: If the invitation is absent or withdrawn.
            InvitationExpiredError: If the invitation has expired.
            InvitationEmailMismatchError: If the invitation is for another email.
            AlreadyAMemberError: If the user is already an active member,
                including a retry of an accept that already succeeded.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            member, _ = await self._process_acceptance(uow, invitation, user_id, user_email)

        await self._record_joined(member, invitation_id)
        return member

    async def accept_by_token(
        self,
        token: str,
        user_id: UUID,
        user_email: str,
    ) -> ProjectMember:
        """Accept an invitation using the raw token shared with the invitee."""
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(self._hash_token(token))
            member, invitation_id = await self._process_acceptance(
                uow, invitation, user_id, user_email
            )

        await self._record_joined(member, invitation_id)
        return member

    async def decline(
        self,
        invitation_id: UUID,
        user_id: UUID,
        user_email: str,
    ) -> Invitation:
        """Decline a pending invitation addressed to the current user.

        The row is kept with status ``declined``.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            if not invitation:
                raise InvitationNotFoundError(str(invitation_id))
            if not invitation.is_for(user_email):
                raise InvitationEmailMismatchError()
            if invitation.is_accepted:
                raise InvitationAlreadyAcceptedError()
            if invitation.status != InvitationStatus.PENDING:
                raise InvitationNotFoundError(str(invitation_id))

            declined = await uow.invitations.update_status(invitation_id, InvitationStatus.DECLINED)
            await uow.commit()

        if self._activity:
            await self._activity.record(
                project_id=declined.project_id,
                actor_id=user_id,
                action=Actions.INVITATION_DECLINED,
                resource_type=ResourceTypes.INVITATION,
                resource_id=invitation_id,
                metadata={"email": declined.email},
            )
        return declined

    async def cancel(
        self,
        actor_id: UUID,
        invitation_id: UUID,
        project_id: UUID | None = None,
    ) -> Invitation:
        """Withdraw a pending invitation. Requires Admin+ on its project.

        When ``project_id`` is given the invitation must belong to it.
        """
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_id(invitation_id)
            if not invitation or (project_id and invitation.project_id != project_id):
                raise InvitationNotFoundError(str(invitation_id))

            await require_project(uow, invitation.project_id)
            await require_role(uow, invitation.project_id, actor_id, ProjectRole.ADMIN)

            if invitation.status != InvitationStatus.PENDING:
                raise InvitationNotFoundError(str(invitation_id))

            cancelled = await uow.invitations.update_status(
                invitation_id, InvitationStatus.CANCELLED
            )
            await uow.commit()

        if self._activity:
            await self._activity.record(
                project_id=cancelled.project_id,
                actor_id=actor_id,
                action=Actions.INVITATION_CANCELLED,
                resource_type=ResourceTypes.INVITATION,
                resource_id=invitation_id,
                metadata={"email": cancelled.email},
            )
        return cancelled

    @retry_transient()
    async def list_pending_for_project(
        self,
        project_id: UUID,
        user_id: UUID,
    ) -> list[Invitation]:
        """Pending, unexpired invitations of a project. Requires view access."""
        async with self._uow_factory() as uow:
            await require_project(uow, project_id)
            await require_role(uow, project_id, user_id, ProjectRole.VIEWER)
            return await uow.invitations.get_pending_for_project(  # type: ignore[no-any-return]
                project_id
            )

    @retry_transient()
    async def list_pending_for_user(self, email: str) -> list[Invitation]:
        """Pending, unexpired invitations addressed to an email.

        Used to show the invitation banner after login.
        """
        async with self._uow_factory() as uow:
            return await uow.invitations.get_pending_for_email(  # type: ignore[no-any-return]
                email.strip().lower()
            )

    # --- Internal helpers ---

    async def _process_acceptance(
        self,
        uow: IUnitOfWork,
        invitation: Invitation | None,
        user_id: UUID,
        user_email: str,
    ) -> tuple[ProjectMember, UUID]:
        """Shared validation and acceptance logic for both token and ID flows.

        Returns the new membership and the id of the consumed invitation.
        """
        if not invitation or invitation.status in (
            InvitationStatus.CANCELLED,
            InvitationStatus.DECLINED,
        ):
            raise InvitationNotFoundError()

        # A retried accept must not create a second membership
        if invitation.is_accepted:
            if not invitation.is_for(user_email):
                raise InvitationEmailMismatchError()
            raise AlreadyAMemberError(str(user_id))

        if invitation.is_expired:
            if invitation.status == InvitationStatus.PENDING:
                await uow.invitations.update_status(invitation.id, InvitationStatus.EXPIRED)
                await uow.commit()
            raise InvitationExpiredError()

        if not invitation.is_for(user_email):
            raise InvitationEmailMismatchError()

        now = datetime.utcnow()
        existing = await uow.projects.get_member(invitation.project_id, user_id)
        if existing and existing.is_active:
            await uow.invitations.update_status(
                invitation.id, InvitationStatus.ACCEPTED, accepted_at=now
            )
            await uow.commit()
            raise AlreadyAMemberError(str(user_id))

        try:
            if existing:
                # Rejoining after removal reuses the membership row
                existing.role = invitation.role
                existing.status = MembershipStatus.ACTIVE
                existing.invited_by = invitation.invited_by
                existing.joined_at = now
                existing.updated_at = now
                member = await uow.projects.update_member(existing)
            else:
                member = await uow.projects.add_member(
                    ProjectMember(
                        project_id=invitation.project_id,
                        user_id=user_id,
                        role=invitation.role,
                        invited_by=invitation.invited_by,
                        joined_at=now,
                        updated_at=now,
                    )
                )

            await uow.invitations.update_status(
                invitation.id, InvitationStatus.ACCEPTED, accepted_at=now
            )
            await uow.commit()
        except IntegrityError as exc:
            await uow.rollback()
            # A concurrent accept for the same user created the membership first
            raise AlreadyAMemberError(str(user_id)) from exc

        logger.info(
            "invitation_accepted",
            project_id=str(invitation.project_id),
            invitation_id=str(invitation.id),
            user_id=str(user_id),
            role=member.role.label,
        )
        return member, invitation.id

    async def _record_joined(self, member: ProjectMember, invitation_id: UUID) -> None:
        if self._activity:
            await self._activity.record(
                project_id=member.project_id,
                actor_id=member.user_id,
                action=Actions.JOINED,
                resource_type=ResourceTypes.TEAM_MEMBER,
                resource_id=member.user_id,
                metadata={"role": member.role.label, "invitation_id": str(invitation_id)},
            )

    @staticmethod
    def _hash_token(token: str) -> str:
        """Hash a raw invitation token using SHA-256."""
        return hashlib.sha256(token.encode()).hexdigest()
