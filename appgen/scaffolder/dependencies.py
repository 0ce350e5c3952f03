"""Fixed dependency table and manifest dependency resolution.

Each stack choice maps to a fixed ``{package: versionRange}`` set for runtime
and development dependencies.  The sets for every choice a specification
makes are unioned; no version solving is attempted, but two choices that ask
for different ranges of the same package raise
:class:`DependencyConflictError` instead of one silently winning.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

from appgen.errors import DependencyConflictError
from appgen.spec.models import (
    ApiStyle,
    Language,
    Orm,
    Router,
    Specification,
    StateManagement,
    Styling,
    ValidationLibrary,
)

DEPS = "dependencies"
DEV_DEPS = "devDependencies"

DependencySet = Mapping[str, Mapping[str, str]]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

DEPENDENCY_TABLE: dict[str, DependencySet] = {
    # Always present
    "runtime:node": {
        DEPS: {"dotenv": "^16.4.5"},
        DEV_DEPS: {
            "vite": "^5.1.6",
            "vitest": "^1.3.1",
            "eslint": "^8.57.0",
            "prettier": "^3.2.5",
            "eslint-config-prettier": "^9.1.0",
        },
    },
    "language:typescript": {
        DEV_DEPS: {
            "typescript": "^5.3.3",
            "@types/node": "^20.11.0",
            "tsx": "^4.7.1",
            "@typescript-eslint/parser": "^7.1.1",
        },
    },
    # Frontend
    "frontend:react": {
        DEPS: {"react": "^18.3.1", "react-dom": "^18.3.1"},
        DEV_DEPS: {"@vitejs/plugin-react": "^4.2.1"},
    },
    "frontend:vue": {
        DEPS: {"vue": "^3.4.21"},
        DEV_DEPS: {"@vitejs/plugin-vue": "^5.0.4"},
    },
    "frontend:svelte": {
        DEPS: {"svelte": "^4.2.12"},
        DEV_DEPS: {"@sveltejs/vite-plugin-svelte": "^3.0.2"},
    },
    "frontend-typescript:react": {
        DEV_DEPS: {"@types/react": "^18.2.64", "@types/react-dom": "^18.2.21"},
    },
    "frontend-typescript:vue": {
        DEV_DEPS: {"vue-tsc": "^2.0.6"},
    },
    "frontend-typescript:svelte": {
        DEV_DEPS: {"svelte-check": "^3.6.6"},
    },
    "router:react-router": {DEPS: {"react-router-dom": "^6.22.3"}},
    "router:vue-router": {DEPS: {"vue-router": "^4.3.0"}},
    "router:svelte-routing": {DEPS: {"svelte-routing": "^2.12.0"}},
    "state:redux": {DEPS: {"@reduxjs/toolkit": "^2.2.1", "react-redux": "^9.1.0"}},
    "state:zustand": {DEPS: {"zustand": "^4.5.2"}},
    "state:pinia": {DEPS: {"pinia": "^2.1.7"}},
    "state:svelte-store": {},
    "styling:tailwind": {
        DEV_DEPS: {"tailwindcss": "^3.4.1", "postcss": "^8.4.35", "autoprefixer": "^10.4.18"},
    },
    "styling:css": {},
    # Backend
    "backend:express": {DEPS: {"express": "^4.18.3", "cors": "^2.8.5"}},
    "backend:fastify": {DEPS: {"fastify": "^4.26.2", "@fastify/cors": "^9.0.1"}},
    "backend-typescript:express": {
        DEV_DEPS: {"@types/express": "^4.17.21", "@types/cors": "^2.8.17"},
    },
    "backend-typescript:fastify": {},
    "api:graphql": {DEPS: {"graphql": "^16.8.1"}},
    "validation:zod": {DEPS: {"zod": "^3.22.4"}},
    "validation:joi": {DEPS: {"joi": "^17.12.2"}},
    "validation:yup": {DEPS: {"yup": "^1.4.0"}},
    # Database drivers (only when the ORM does not bring its own)
    "driver:postgresql": {DEPS: {"pg": "^8.11.3"}},
    "driver:mysql": {DEPS: {"mysql2": "^3.9.2"}},
    "driver:sqlite": {DEPS: {"better-sqlite3": "^9.4.3"}},
    "driver:mongodb": {DEPS: {"mongodb": "^6.5.0"}},
    "orm:prisma": {DEPS: {"@prisma/client": "^5.11.0"}, DEV_DEPS: {"prisma": "^5.11.0"}},
    "orm:drizzle": {DEPS: {"drizzle-orm": "^0.30.1"}, DEV_DEPS: {"drizzle-kit": "^0.20.14"}},
    "orm:mongoose": {DEPS: {"mongoose": "^8.2.1"}},
    # Feature flags
    "feature:authentication": {DEPS: {"jsonwebtoken": "^9.0.2", "bcryptjs": "^2.4.3"}},
    "feature-typescript:authentication": {
        DEV_DEPS: {"@types/jsonwebtoken": "^9.0.6", "@types/bcryptjs": "^2.4.6"},
    },
}

# ORMs that ship their own database connectivity.
_SELF_CONNECTING_ORMS = frozenset({Orm.PRISMA, Orm.MONGOOSE})


class ResolvedDependencies(BaseModel):
    """Union of the dependency sets for one specification."""

    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    sources: dict[str, str] = Field(
        default_factory=dict, description="package -> choice key that contributed it"
    )


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def stack_choices(spec: Specification) -> list[str]:
    """Return the dependency-table keys selected by *spec*, in a fixed order."""
    frontend = spec.stack.frontend
    backend = spec.stack.backend
    database = spec.stack.database

    keys = ["runtime:node"]
    if spec.stack.uses_typescript:
        keys.append("language:typescript")

    keys.append(f"frontend:{frontend.framework.value}")
    if frontend.language == Language.TYPESCRIPT:
        keys.append(f"frontend-typescript:{frontend.framework.value}")
    if frontend.router != Router.NONE:
        keys.append(f"router:{frontend.router.value}")
    if frontend.state_management != StateManagement.NONE:
        keys.append(f"state:{frontend.state_management.value}")
    if frontend.styling != Styling.NONE:
        keys.append(f"styling:{frontend.styling.value}")

    keys.append(f"backend:{backend.framework.value}")
    if backend.language == Language.TYPESCRIPT:
        keys.append(f"backend-typescript:{backend.framework.value}")
    if backend.api == ApiStyle.GRAPHQL:
        keys.append("api:graphql")
    if backend.validation != ValidationLibrary.NONE:
        keys.append(f"validation:{backend.validation.value}")

    if database.orm not in _SELF_CONNECTING_ORMS:
        keys.append(f"driver:{database.type.value}")
    if database.orm != Orm.NONE:
        keys.append(f"orm:{database.orm.value}")

    if spec.auth_enabled:
        keys.append("feature:authentication")
        if backend.language == Language.TYPESCRIPT:
            keys.append("feature-typescript:authentication")
    return keys


def resolve_dependencies(
    choices: list[str],
    table: Mapping[str, DependencySet] | None = None,
) -> ResolvedDependencies:
    """Union the dependency sets for *choices*.

    A package requested with the same range in both sections is kept as a
    runtime dependency only.

    Raises:
        KeyError: If a choice has no table entry.
        DependencyConflictError: If two choices request different ranges for
            the same package.
    """
    table = DEPENDENCY_TABLE if table is None else table
    ranges: dict[str, str] = {}
    sources: dict[str, str] = {}
    runtime: set[str] = set()

    for choice in choices:
        entry = table[choice]
        for section in (DEPS, DEV_DEPS):
            for package, version in entry.get(section, {}).items():
                if package in ranges and ranges[package] != version:
                    raise DependencyConflictError(
                        package, {sources[package]: ranges[package], choice: version}
                    )
                if package not in ranges:
                    ranges[package] = version
                    sources[package] = choice
                if section == DEPS:
                    runtime.add(package)

    return ResolvedDependencies(
        dependencies={p: ranges[p] for p in sorted(ranges) if p in runtime},
        dev_dependencies={p: ranges[p] for p in sorted(ranges) if p not in runtime},
        sources={p: sources[p] for p in sorted(sources)},
    )


def dependencies_for(spec: Specification) -> ResolvedDependencies:
    """Resolve the manifest dependencies for a specification."""
    return resolve_dependencies(stack_choices(spec))
