"""
Create a demo user with a workspace, projects and tasks for local testing.

Usage:
    python scripts/create_user_with_data.py [email] [password]
"""

import asyncio
import sys
from datetime import timedelta
from uuid import uuid4

sys.path.insert(0, ".")

from sqlalchemy import select

from workhub.database import async_session_maker
from workhub.models import Task, TaskStatus, User
from workhub.models.member import Member
from workhub.services.lifecycle_service import create_project, create_workspace
from workhub.services.position_service import next_position
from workhub.utils.dates import utcnow
from workhub.utils.security import get_password_hash

DEMO_PROJECTS = {
    "Website Redesign": [
        ("Audit current pages", TaskStatus.DONE, -10),
        ("Draft new navigation", TaskStatus.IN_REVIEW, 3),
        ("Build landing page", TaskStatus.IN_PROGRESS, 7),
        ("Migrate blog posts", TaskStatus.TODO, 14),
        ("Accessibility pass", TaskStatus.BACKLOG, 30),
    ],
    "Mobile App": [
        ("Set up CI", TaskStatus.DONE, -3),
        ("Login screen", TaskStatus.IN_PROGRESS, -1),
        ("Push notifications", TaskStatus.TODO, 21),
    ],
}


async def create_user_with_data(email: str, password: str) -> None:
    async with async_session_maker() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user:
            user = User(
                id=uuid4(),
                email=email,
                password_hash=get_password_hash(password),
                name="Demo User",
            )
            db.add(user)
            await db.commit()
            print(f"Created user: {email}")
        else:
            print(f"User {email} already exists")

        workspace = await create_workspace(db, user, name="Demo Workspace")
        print(f"Created workspace: {workspace.name} (invite code {workspace.invite_code})")

        result = await db.execute(
            select(Member).where(
                Member.workspace_id == workspace.id,
                Member.user_id == user.id,
            )
        )
        member = result.scalar_one()

        for project_name, tasks in DEMO_PROJECTS.items():
            project = await create_project(db, workspace.id, name=project_name)
            for name, task_status, due_in_days in tasks:
                db.add(
                    Task(
                        workspace_id=workspace.id,
                        project_id=project.id,
                        assignee_id=member.id,
                        name=name,
                        status=task_status.value,
                        due_date=utcnow() + timedelta(days=due_in_days),
                        position=await next_position(db, workspace.id, task_status),
                    )
                )
                await db.flush()
            await db.commit()
            print(f"Created project: {project_name} with {len(tasks)} tasks")

    print("\nDone!")
    print(f"Login: {email} / {password}")


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else "demo@example.com"
    password = sys.argv[2] if len(sys.argv) > 2 else "DemoPass123!"
    asyncio.run(create_user_with_data(email, password))
