"""
The default question graph of the Codex app scaffolder.

Nine phases, asked in order: repository setup, metadata, language and
structure, environment, framework/UI/routing, quality tooling,
infrastructure, repository hosting, automation.
"""

from typing import Any, Sequence, Tuple

from codexgen.expressions import (
    AnswerReference,
    BinaryExpression,
    BinaryOperator,
    Literal,
    UnaryExpression,
    UnaryOperator,
)
from codexgen.model import (
    Choice,
    ChoiceRule,
    Phase,
    Question,
    QuestionGraph,
    QuestionKind,
    ValidationRule,
)

NAME_PATTERN = r"^[A-Za-z0-9\-_]+$"
DEFAULT_PROJECT_NAME = "my-codex-app"


def _is(question_id: str, value: Any) -> BinaryExpression:
    return BinaryExpression(
        operator=BinaryOperator.EQUALS,
        left=AnswerReference(question_id),
        right=Literal(value),
    )


def _choices(*values: Any) -> Tuple[Choice, ...]:
    return tuple(Choice(v) for v in values)


def _labelled(*pairs: Sequence[str]) -> Tuple[Choice, ...]:
    return tuple(Choice(value, label) for label, value in pairs)


def name_rules(question_id: str = "projectName") -> Tuple[ValidationRule, ...]:
    """Project name: non-empty, letters, digits, dashes and underscores only."""
    return (
        ValidationRule(
            expression=BinaryExpression(
                operator=BinaryOperator.MATCHES,
                left=AnswerReference(question_id),
                right=Literal(r"(?s).*\S.*"),
            ),
            message="Project name cannot be empty",
        ),
        ValidationRule(
            expression=BinaryExpression(
                operator=BinaryOperator.MATCHES,
                left=AnswerReference(question_id),
                right=Literal(NAME_PATTERN),
            ),
            message="Use only letters, numbers, dashes or underscores",
        ),
    )


def _confirm(question_id: str, message: str, phase: Phase, default: bool, visible_when=None) -> Question:
    return Question(
        id=question_id,
        kind=QuestionKind.CONFIRM,
        message=message,
        phase=phase,
        default=default,
        visible_when=visible_when,
    )


def _select(question_id: str, message: str, phase: Phase, choices, default=None, visible_when=None) -> Question:
    return Question(
        id=question_id,
        kind=QuestionKind.SINGLE_CHOICE,
        message=message,
        phase=phase,
        choices=choices,
        default=default,
        visible_when=visible_when,
    )


def _text(question_id: str, message: str, phase: Phase, default: str = "", **extra) -> Question:
    return Question(
        id=question_id,
        kind=QuestionKind.FREE_TEXT,
        message=message,
        phase=phase,
        default=default,
        **extra,
    )


def build_default_graph() -> QuestionGraph:
    graph = QuestionGraph(name="create-codex-app")

    wants_remote = _is("createRemote", True)

    repository_setup = [
        _confirm("initGit", "🐙 Initialize a Git repository?", Phase.REPOSITORY_SETUP, True),
        _confirm(
            "createRemote", "📦 Create a remote GitHub repository?", Phase.REPOSITORY_SETUP, False,
            visible_when=_is("initGit", True),
        ),
    ]

    metadata = [
        _text(
            "projectName", "🧱 Project name:", Phase.METADATA, DEFAULT_PROJECT_NAME,
            validation=name_rules(),
        ),
        _text("description", "📝 Short description (optional):", Phase.METADATA),
        _text("author", "👤 Author (name/email) (optional):", Phase.METADATA),
        _select(
            "license", "📜 License:", Phase.METADATA,
            _choices("MIT", "Apache-2.0", "GPL-3.0", "Unlicense", "Other"), default="MIT",
        ),
        _text(
            "packageScope", "📦 Package scope (optional, without @):", Phase.METADATA,
            transform="scope",
        ),
    ]

    language_structure = [
        _select(
            "language", "💬 Language preference:", Phase.LANGUAGE_STRUCTURE,
            _labelled(("TypeScript", "typescript"), ("JavaScript", "javascript")),
            default="typescript",
        ),
        _select(
            "structure", "📁 Project structure:", Phase.LANGUAGE_STRUCTURE,
            _labelled(("Flat (no src folder)", "flat"), ("With src/ folder", "src-folder")),
            default="src-folder",
        ),
    ]

    environment = [
        _select(
            "registry", "📦 Package manager:", Phase.ENVIRONMENT,
            _choices("npm", "pnpm", "yarn", "bun"), default="npm",
        ),
        _select(
            "workspace", "🧩 Workspace type:", Phase.ENVIRONMENT,
            _labelled(("Single project", "single"), ("Turborepo (monorepo)", "turborepo")),
            default="single",
        ),
    ]

    framework = [
        _select(
            "framework", "⚙️ Choose framework:", Phase.FRAMEWORK,
            _labelled(("React (Vite)", "react"), ("Next.js (App Router)", "next"), ("Vue (Vite)", "vue")),
            default="react",
        ),
        _select(
            "ui", "🎨 UI library:", Phase.FRAMEWORK,
            _choices("tailwind", "mui", "shadcn", "antd", "none"), default="tailwind",
        ),
        Question(
            id="routing",
            kind=QuestionKind.SINGLE_CHOICE,
            message="🗺 Routing:",
            phase=Phase.FRAMEWORK,
            choice_rules=(
                ChoiceRule(
                    guard=_is("framework", "next"),
                    choices=_labelled(("App Router (recommended)", "app"), ("Pages Router", "pages")),
                ),
                ChoiceRule(guard=_is("framework", "vue"), choices=_labelled(("Vue Router", "vue-router"))),
                ChoiceRule(choices=_labelled(("React Router (vite)", "react-router"))),
            ),
        ),
    ]

    quality = [
        _select(
            "editor", "🧠 Preferred editor configuration:", Phase.QUALITY,
            _labelled(("VS Code", "vscode"), ("Sublime Text", "sublime"), ("Atom", "atom"), ("None", "none")),
            default="vscode",
        ),
        _select(
            "testing", "🧪 Testing framework:", Phase.QUALITY,
            _labelled(
                ("Vitest (unit, fast, Vite-friendly)", "vitest"),
                ("Jest (Next.js default)", "jest"),
                ("Playwright (E2E browser tests)", "playwright"),
                ("Cypress (E2E UI tests)", "cypress"),
                ("None", "none"),
            ),
            default="none",
        ),
        _select(
            "linting", "🔍 Linting:", Phase.QUALITY,
            _labelled(("ESLint", "eslint"), ("None", "none")), default="eslint",
        ),
        _select(
            "formatting", "🎨 Formatting:", Phase.QUALITY,
            _labelled(("Prettier", "prettier"), ("None", "none")), default="prettier",
        ),
        _confirm("commitConventions", "🔁 Use Conventional Commits (commitlint + husky)?", Phase.QUALITY, True),
    ]

    has_database = BinaryExpression(
        operator=BinaryOperator.AND,
        left=UnaryExpression(operator=UnaryOperator.PRESENT, operand=AnswerReference("database")),
        right=BinaryExpression(
            operator=BinaryOperator.NOT_EQUALS,
            left=AnswerReference("database"),
            right=Literal("none"),
        ),
    )

    infrastructure = [
        _confirm("auth", "🔐 Add authentication (starter setup)?", Phase.INFRASTRUCTURE, False),
        _select(
            "authProvider", "🔑 Auth Provider:", Phase.INFRASTRUCTURE,
            _labelled(
                ("NextAuth (Next only)", "nextauth"),
                ("Clerk", "clerk"),
                ("Supabase Auth", "supabase"),
                ("None", "none"),
            ),
            default="nextauth",
            visible_when=_is("auth", True),
        ),
        _select(
            "database", "🗄 Database (for starter config):", Phase.INFRASTRUCTURE,
            _labelled(
                ("None", "none"),
                ("Postgres (Prisma)", "prisma-postgres"),
                ("Supabase", "supabase"),
                ("MongoDB", "mongo"),
                ("SQLite (local)", "sqlite"),
            ),
            default="none",
        ),
        Question(
            id="orm",
            kind=QuestionKind.SINGLE_CHOICE,
            message="🧭 ORM:",
            phase=Phase.INFRASTRUCTURE,
            default="prisma",
            visible_when=has_database,
            choice_rules=(
                ChoiceRule(
                    guard=BinaryExpression(
                        operator=BinaryOperator.IN,
                        left=AnswerReference("database"),
                        right=Literal(("prisma-postgres", "sqlite")),
                    ),
                    choices=_labelled(("Prisma", "prisma"), ("None", "none")),
                ),
                ChoiceRule(
                    guard=_is("database", "mongo"),
                    choices=_labelled(("Mongoose/TypeORM", "typeorm"), ("None", "none")),
                ),
                ChoiceRule(choices=_labelled(("None", "none"))),
            ),
        ),
        _select(
            "caching", "⚡ Caching strategy:", Phase.INFRASTRUCTURE,
            _labelled(
                ("None", "none"),
                ("API-level cache (stale-while-revalidate)", "api-cache"),
                ("Edge cache (CDN)", "edge"),
                ("Redis (external)", "redis"),
            ),
            default="none",
        ),
        _confirm("analytics", "📈 Add analytics starter (PostHog / Plausible)?", Phase.INFRASTRUCTURE, False),
        _confirm("monitoring", "🛠 Add error monitoring (Sentry / Playwright traces)?", Phase.INFRASTRUCTURE, False),
    ]

    repository_hosting = [
        _text(
            "remoteOrg", "🏢 GitHub organization (leave blank to use your account):",
            Phase.REPOSITORY_HOSTING, visible_when=wants_remote,
        ),
        _select(
            "repoVisibility", "🔒 Repository visibility:", Phase.REPOSITORY_HOSTING,
            _labelled(("Public", "public"), ("Private", "private")), default="public",
            visible_when=wants_remote,
        ),
        _confirm("setupCI", "⚡ Configure CI / deploy?", Phase.REPOSITORY_HOSTING, False, visible_when=wants_remote),
        _select(
            "ciProvider", "🚀 Deployment target:", Phase.REPOSITORY_HOSTING,
            _labelled(
                ("Vercel", "vercel"),
                ("Netlify", "netlify"),
                ("GitHub Actions", "github-actions"),
                ("None", "none"),
            ),
            visible_when=_is("setupCI", True),
        ),
    ]

    automation = [
        _confirm("autoInstall", "⚙️ Run package install after generation?", Phase.AUTOMATION, True),
        _confirm("autoStart", "▶️ Start dev server after install?", Phase.AUTOMATION, False),
        _confirm("useAI", "🤖 Let AI suggest config (experimental)?", Phase.AUTOMATION, False),
    ]

    graph.questions = (
        repository_setup
        + metadata
        + language_structure
        + environment
        + framework
        + quality
        + infrastructure
        + repository_hosting
        + automation
    )
    graph.metadata = {"source": "create-codex-app"}
    return graph
