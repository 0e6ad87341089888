"""CRUD operations for client projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlmodel import col, select

from scriptflow.db.engine import get_session
from scriptflow.db.models import Project, User, Video
from scriptflow.db.users import find_or_create_user

if TYPE_CHECKING:
    from uuid import UUID

logger = logging.getLogger(__name__)


class ProjectNotFoundError(LookupError):
    """Raised when a project id does not exist."""

    def __init__(self, project_id: UUID) -> None:
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


async def create_project(title: str, client_email: str | None = None) -> Project:
    """Create a project, optionally owned by a client.

    Args:
        title: Project name.
        client_email: Owning client's email. A placeholder client account is
            created if none exists yet.

    Returns:
        The created Project.
    """
    client_id = None
    if client_email and client_email.strip():
        client, _created = await find_or_create_user(client_email.strip())
        client_id = client.id

    async with get_session() as session:
        project = Project(title=title, client_id=client_id)
        session.add(project)
        await session.flush()
        await session.refresh(project)
        logger.info("Created project %s (%s)", project.id, title)
        return project


async def get_project(project_id: UUID) -> Project | None:
    async with get_session() as session:
        return await session.get(Project, project_id)


async def list_projects_for(user: User) -> list[tuple[Project, list[Video]]]:
    """Projects visible to ``user`` with their videos.

    Staff see every project; clients see only projects they own. Projects
    are newest first and videos are in display order.
    """
    async with get_session() as session:
        query = select(Project).order_by(col(Project.created_at).desc())
        if not user.is_staff:
            query = query.where(Project.client_id == user.id)
        projects = list((await session.exec(query)).all())

        if not projects:
            return []

        video_rows = await session.exec(
            select(Video)
            .where(col(Video.project_id).in_([p.id for p in projects]))
            .order_by(col(Video.display_order), col(Video.created_at))
        )
        by_project: dict[UUID, list[Video]] = {p.id: [] for p in projects}
        for video in video_rows.all():
            by_project[video.project_id].append(video)

        return [(project, by_project[project.id]) for project in projects]


async def update_project(
    project_id: UUID,
    *,
    title: str | None = None,
    client_email: str | None = None,
) -> Project:
    """Rename a project or reassign its client.

    Raises:
        ProjectNotFoundError: If the project does not exist.
    """
    client_id = None
    if client_email:
        client, _created = await find_or_create_user(client_email.strip())
        client_id = client.id

    async with get_session() as session:
        project = await session.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        if title:
            project.title = title
        if client_id is not None:
            project.client_id = client_id
        session.add(project)
        await session.flush()
        await session.refresh(project)
        return project


async def delete_project(project_id: UUID) -> bool:
    """Delete a project and, by cascade, its videos, tabs and comments.

    Returns:
        True if a project was deleted.
    """
    async with get_session() as session:
        project = await session.get(Project, project_id)
        if project is None:
            return False
        await session.delete(project)
        logger.info("Deleted project %s", project_id)
        return True
