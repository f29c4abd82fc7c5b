from __future__ import annotations

import argparse
import random
import sys
from datetime import timedelta
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from devhub.database import Base, SessionLocal, engine  # noqa: E402
from devhub.models.comment import Comment  # noqa: E402
from devhub.models.project import Project  # noqa: E402
from devhub.models.skills import Skill  # noqa: E402
from devhub.models.upload import Upload  # noqa: E402
from devhub.models.user import User  # noqa: E402
from devhub.services.account_service import derive_username  # noqa: E402
from devhub.utils.dates import utc_now  # noqa: E402
from devhub.utils.password_hash import hash_password  # noqa: E402


DEMO_PASSWORD = "password123"

USERS = [
    {
        "email": "demo@devhub.com",
        "first_name": "Demo",
        "last_name": "User",
        "bio": "Full-stack developer passionate about building web applications and solving hard problems.",
    },
    {
        "email": "sarah.dev@example.com",
        "first_name": "Sarah",
        "last_name": "Developer",
        "bio": "Frontend specialist with a passion for clean, accessible user interfaces.",
    },
    {
        "email": "mike.engineer@example.com",
        "first_name": "Mike",
        "last_name": "Engineer",
        "bio": "Backend engineer focused on scalable architecture and performance.",
    },
    {
        "email": "alex.reviewer@example.com",
        "first_name": "Alex",
        "last_name": "Reviewer",
        "bio": "Tech lead and code reviewer with 8+ years of experience.",
    },
]

SKILLS = [
    ("React", "frontend", 5, 4, "React ecosystem including hooks, context and performance work"),
    ("TypeScript", "frontend", 4, 3, "Strong typing and advanced TypeScript patterns"),
    ("Next.js", "frontend", 4, 2, "Server-side rendering and static generation"),
    ("Tailwind CSS", "frontend", 5, 3, "Utility-first CSS"),
    ("JavaScript", "frontend", 5, 6, "ES6+, async/await and modern JS patterns"),
    ("Node.js", "backend", 5, 4, "Server-side JavaScript and API development"),
    ("Express.js", "backend", 5, 4, "RESTful APIs and middleware development"),
    ("MongoDB", "database", 4, 3, "Document database design and aggregation pipelines"),
    ("PostgreSQL", "database", 4, 3, "Relational database design and complex queries"),
    ("Docker", "tools", 4, 2, "Containerization and orchestration"),
    ("Git", "tools", 5, 5, "Version control and collaborative development"),
    ("AWS", "cloud", 3, 2, "EC2, S3, Lambda and other AWS services"),
]

PROJECTS = [
    {
        "title": "DevHub Portfolio",
        "description": "A portfolio platform showing authentication, CRUD operations and modern UI patterns.",
        "technologies": ["React", "TypeScript", "Node.js", "Express", "MongoDB", "Tailwind CSS", "JWT"],
        "github_url": "https://github.com/example/devhub-portfolio",
        "live_url": "https://devhub-portfolio.vercel.app",
        "status": "completed",
        "priority": "high",
        "featured": True,
        "likes": 45,
        "views": 234,
    },
    {
        "title": "E-Commerce API",
        "description": "RESTful API for an e-commerce platform with product management, orders and payments.",
        "technologies": ["Node.js", "Express", "PostgreSQL", "Stripe API", "JWT", "Jest"],
        "github_url": "https://github.com/example/ecommerce-api",
        "status": "completed",
        "priority": "high",
        "featured": True,
        "likes": 32,
        "views": 189,
    },
    {
        "title": "Task Management Dashboard",
        "description": "Team task dashboard with real-time updates and drag-and-drop boards.",
        "technologies": ["React", "TypeScript", "Socket.io", "Node.js", "MongoDB", "Tailwind CSS"],
        "github_url": "https://github.com/example/task-dashboard",
        "live_url": "https://task-dashboard-demo.netlify.app",
        "status": "in-progress",
        "priority": "medium",
        "featured": False,
        "likes": 18,
        "views": 156,
    },
]

# (project index, comment, rating)
COMMENTS = [
    (0, "Impressive work! The authentication system is really well implemented.", 5),
    (0, "Love the UI design! How long did this take to build?", 4),
    (0, "The responsive design works well across devices. Solid portfolio piece.", 5),
    (1, "Excellent API design! Have you considered adding GraphQL endpoints?", 4),
    (1, "Really thorough testing with Jest. The Stripe integration looks clean.", 5),
    (2, "The real-time features are great. Already impressive while in progress.", 4),
    (2, "Drag and drop is smooth. Looking forward to the final version!", 4),
]


def _counts(db) -> dict[str, int]:
    return {
        "users": db.query(User).count(),
        "projects": db.query(Project).count(),
        "skills": db.query(Skill).count(),
        "comments": db.query(Comment).count(),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed demo users, skills, projects and comments.")
    parser.add_argument("--force", action="store_true", help="Drop existing rows before seeding")
    parser.add_argument("--random-seed", type=int, default=None)
    args = parser.parse_args(argv)

    rng = random.Random(args.random_seed)
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        existing = _counts(db)
        if any(existing.values()):
            if not args.force:
                print(f"database already contains data: {existing}")
                print("re-run with --force to drop it and reseed")
                return 1
            for model in (Comment, Upload, Project, Skill, User):
                db.query(model).delete()
            db.commit()

        password = hash_password(DEMO_PASSWORD)
        users: list[User] = []
        for item in USERS:
            user = User(
                password=password,
                username=derive_username(db, item["email"]),
                role="user",
                is_verified=True,
                **item,
            )
            db.add(user)
            db.flush()
            users.append(user)

        demo = users[0]
        now = utc_now()
        for name, category, level, years, description in SKILLS:
            db.add(
                Skill(
                    user_id=demo.id,
                    name=name,
                    category=category,
                    proficiency_level=level,
                    years_of_experience=years,
                    description=description,
                    endorsements=rng.randint(0, 20),
                    last_used=now - timedelta(days=rng.randint(0, 365)),
                    certifications=[f"{name} Certification"] if rng.random() > 0.7 else [],
                )
            )

        projects: list[Project] = []
        for item in PROJECTS:
            project = Project(
                user_id=demo.id,
                start_date=(now - timedelta(days=rng.randint(30, 365))).date(),
                end_date=now.date() if item["status"] == "completed" else None,
                **item,
            )
            db.add(project)
            db.flush()
            projects.append(project)

        for project_index, content, rating in COMMENTS:
            db.add(
                Comment(
                    project_id=projects[project_index].id,
                    user_id=rng.choice(users[1:]).id,
                    content=content,
                    rating=rating,
                )
            )
        db.commit()

        print(f"seeded: {_counts(db)}")
        print(f"demo login: {USERS[0]['email']} / {DEMO_PASSWORD}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
