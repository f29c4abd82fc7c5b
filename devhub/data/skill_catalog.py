from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel


class CatalogSkill(BaseModel):
    name: str
    category: str


_CATALOG: dict[str, tuple[str, ...]] = {
    "frontend": (
        "React", "Vue.js", "Angular", "TypeScript", "JavaScript", "Next.js", "Nuxt.js",
        "Tailwind CSS", "Styled Components", "Material-UI", "Ant Design", "Bootstrap",
        "Sass", "Less", "Webpack", "Vite", "Parcel", "ESLint", "Prettier",
    ),
    "backend": (
        "Node.js", "Express.js", "Fastify", "Koa.js", "NestJS", "Python", "Django", "Flask",
        "FastAPI", "Java", "Spring Boot", "C#", ".NET Core", "ASP.NET", "Go", "Gin", "Rust",
        "PHP", "Laravel", "Symfony", "Ruby", "Ruby on Rails",
    ),
    "database": (
        "MongoDB", "PostgreSQL", "MySQL", "SQLite", "Redis", "Elasticsearch", "Firebase",
        "Supabase", "DynamoDB", "Cassandra", "Neo4j", "InfluxDB",
    ),
    "cloud": (
        "AWS", "Azure", "Google Cloud", "Vercel", "Netlify", "Heroku", "DigitalOcean",
        "Linode", "Cloudflare", "AWS Lambda", "AWS EC2", "AWS S3", "AWS RDS",
    ),
    "tools": (
        "Git", "GitHub", "GitLab", "Bitbucket", "Docker", "Kubernetes", "Jenkins",
        "GitHub Actions", "GitLab CI", "CircleCI", "Travis CI", "Terraform", "Ansible",
        "Chef", "Puppet", "Vagrant", "VS Code", "IntelliJ IDEA", "Postman", "Insomnia",
        "Figma", "Adobe XD", "Sketch", "Jira", "Confluence", "Slack", "Discord", "Notion",
    ),
    "mobile": (
        "React Native", "Flutter", "Ionic", "Expo", "Swift", "Kotlin", "Java (Android)",
        "Xamarin", "Cordova", "PhoneGap",
    ),
    "other": (
        "GraphQL", "REST API", "gRPC", "WebSocket", "Socket.io", "JWT", "OAuth", "Stripe",
        "PayPal", "Twilio", "SendGrid", "Mailgun", "Cloudinary", "Algolia", "Auth0", "Clerk",
        "Prisma", "Sequelize", "Mongoose", "Drizzle", "tRPC", "Zod", "Jest", "Vitest",
        "Cypress", "Playwright", "Puppeteer", "Storybook", "Chromatic",
    ),
}


def load_skill_catalog() -> list[CatalogSkill]:
    return [CatalogSkill(name=name, category=category) for category, names in _CATALOG.items() for name in names]


def available_skills(owned_names: Iterable[str]) -> list[CatalogSkill]:
    owned = set(owned_names)
    return [item for item in load_skill_catalog() if item.name not in owned]
