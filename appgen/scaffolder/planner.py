"""Artifact planning.

Walks a validated :class:`Specification` and produces the ordered list of
:class:`ArtifactRequest` values a run must consider, with every target path
resolved and every template already rendered.  Planning is a pure function of
``(specification, mode)``: it never looks at the destination directory, so the
synchronizer only starts once the complete plan is known.
"""

from __future__ import annotations

from typing import Any

from appgen.errors import DuplicateArtifactError
from appgen.scaffolder.config_gen import (
    build_env_file,
    build_eslint_config,
    build_package_json,
    build_prettier_config,
    build_scripts,
    build_tsconfig,
)
from appgen.scaffolder.dependencies import ResolvedDependencies, dependencies_for
from appgen.scaffolder.models import ArtifactCategory, ArtifactRequest, RenderMode
from appgen.scaffolder.templates import TemplateKind, TemplateRegistry
from appgen.spec.models import (
    FrontendFramework,
    Language,
    Orm,
    Specification,
    Styling,
    page_url,
)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

CLIENT_BASE = "src/client"
SERVER_BASE = "src/server"

STRUCTURAL_DIRECTORIES: tuple[str, ...] = (
    f"{CLIENT_BASE}/components",
    f"{CLIENT_BASE}/pages",
    f"{CLIENT_BASE}/styles",
    f"{SERVER_BASE}/routes",
    f"{SERVER_BASE}/models",
    f"{SERVER_BASE}/middleware",
    "public",
    "scripts",
    "tests/unit",
    "tests/integration",
    "tests/e2e",
)

_CATEGORY_DIRS: dict[ArtifactCategory, str] = {
    ArtifactCategory.COMPONENT: f"{CLIENT_BASE}/components",
    ArtifactCategory.PAGE: f"{CLIENT_BASE}/pages",
    ArtifactCategory.ROUTE: f"{SERVER_BASE}/routes",
    ArtifactCategory.MODEL: f"{SERVER_BASE}/models",
}


def frontend_extension(framework: FrontendFramework, language: Language) -> str:
    """File extension for component and page files."""
    if framework == FrontendFramework.VUE:
        return ".vue"
    if framework == FrontendFramework.SVELTE:
        return ".svelte"
    return ".tsx" if language == Language.TYPESCRIPT else ".jsx"


def script_extension(language: Language, jsx: bool = False) -> str:
    """Extension for plain script modules (``jsx`` for React entry files)."""
    if language == Language.TYPESCRIPT:
        return ".tsx" if jsx else ".ts"
    return ".jsx" if jsx else ".js"


def artifact_path(category: ArtifactCategory, name: str, extension: str) -> str:
    """``<base>/<category dir>/<name><ext>`` for per-element artifacts."""
    return f"{_CATEGORY_DIRS[category]}/{name}{extension}"


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------


class ArtifactPlanner:
    """Builds the ordered artifact list for one specification.

    Order is fixed: structural directories, configuration, per-element
    artifacts (components, pages, routes, models in declaration order, then
    styling, the client entry and the ORM schema), the backend entry point,
    and finally documentation and build scripts.
    """

    def __init__(
        self,
        spec: Specification,
        mode: RenderMode = RenderMode.NEW,
        registry: TemplateRegistry | None = None,
    ) -> None:
        self.spec = spec
        self.mode = mode
        self.registry = registry or TemplateRegistry()
        self.renderer = self.registry.renderer

        frontend = spec.stack.frontend
        backend = spec.stack.backend
        self.frontend_ts = frontend.language == Language.TYPESCRIPT
        self.backend_ts = backend.language == Language.TYPESCRIPT
        self.ui_ext = frontend_extension(frontend.framework, frontend.language)
        self.server_ext = script_extension(backend.language)

    # -- Public API --------------------------------------------------------

    def plan(self) -> list[ArtifactRequest]:
        """Produce the complete, ordered artifact list.

        Raises:
            TemplateNotFoundError: A required template is not registered.
            DuplicateArtifactError: Two elements map to the same path.
            DependencyConflictError: The dependency union is inconsistent.
        """
        self._requests: list[ArtifactRequest] = []
        self._seen: dict[str, str] = {}

        deps = dependencies_for(self.spec)
        context = self._build_context(deps)

        # 1. Structural directories
        for directory in STRUCTURAL_DIRECTORIES:
            self._emit(directory, None, ArtifactCategory.DIRECTORY, "layout")

        # 2. Configuration
        self._plan_config(deps, context)

        # 3. Per-element artifacts
        self._plan_components(context)
        self._plan_pages(context)
        self._plan_routes(context)
        self._plan_models(context)
        self._plan_styling(context)
        self._plan_client_entry(context)
        self._plan_orm_schema(context)

        # 4. Backend entry point
        self._plan_server_entry(context)

        # 5. Documentation and build scripts
        self._plan_docs_and_scripts(context)

        return list(self._requests)

    # -- Context building --------------------------------------------------

    def _build_context(self, deps: ResolvedDependencies) -> dict[str, Any]:
        """Build the cross-cutting template context from the specification."""
        spec = self.spec
        return {
            "app": spec.app.model_dump(mode="json"),
            "stack": spec.stack.model_dump(by_alias=True, mode="json"),
            "styling": dict(spec.styling),
            "features": dict(spec.features),
            "auth_enabled": spec.auth_enabled,
            "uses_typescript": spec.stack.uses_typescript,
            "frontend_ts": self.frontend_ts,
            "backend_ts": self.backend_ts,
            "db_type": spec.stack.database.type.value,
            "orm": spec.stack.database.orm.value,
            "components": [c.properties for c in spec.components],
            "pages": [{**p.properties, "url": page_url(p)} for p in spec.pages],
            "routes": [r.properties for r in spec.routes],
            "models": [m.properties for m in spec.models],
            "scripts": build_scripts(spec),
            "dependencies": deps.dependencies,
            "dev_dependencies": deps.dev_dependencies,
            "ui_ext": self.ui_ext,
            "server_ext": self.server_ext,
        }

    # -- Emission ----------------------------------------------------------

    def _emit(
        self,
        path: str,
        content: str | None,
        category: ArtifactCategory,
        source: str,
        executable: bool = False,
    ) -> None:
        key = path.casefold()
        if key in self._seen:
            raise DuplicateArtifactError(path, self._seen[key], source)
        self._seen[key] = source
        self._requests.append(
            ArtifactRequest(
                target_path=path,
                content=content,
                category=category,
                source=source,
                executable=executable,
            )
        )

    def _static(self, template_path: str, context: dict[str, Any]) -> str:
        return self.renderer.render(template_path, context)

    # -- Step 2: configuration ---------------------------------------------

    def _plan_config(self, deps: ResolvedDependencies, ctx: dict[str, Any]) -> None:
        spec = self.spec
        config = ArtifactCategory.CONFIG
        self._emit("package.json", build_package_json(spec, deps), config, "stack")
        if spec.stack.uses_typescript:
            self._emit("tsconfig.json", build_tsconfig(spec), config, "stack")
        self._emit(".eslintrc.json", build_eslint_config(spec), config, "stack")
        self._emit(".prettierrc.json", build_prettier_config(), config, "stack")
        self._emit(".gitignore", self._static("project/gitignore.j2", ctx), config, "stack")

        env = build_env_file(spec)
        self._emit(".env.example", env, config, "stack.database")
        # .env holds user secrets once the project exists; only seed it.
        if self.mode == RenderMode.NEW:
            self._emit(".env", env, config, "stack.database")

    # -- Step 3: per-element artifacts ---------------------------------------

    def _plan_components(self, ctx: dict[str, Any]) -> None:
        framework = self.spec.stack.frontend.framework
        template = self.registry.resolve(TemplateKind.COMPONENT, framework)
        for index, component in enumerate(self.spec.components):
            content = template.render(component.properties, ctx, ts=self.frontend_ts)
            self._emit(
                artifact_path(ArtifactCategory.COMPONENT, component.name, self.ui_ext),
                content,
                ArtifactCategory.COMPONENT,
                f"components[{index}] ({component.name})",
            )

    def _plan_pages(self, ctx: dict[str, Any]) -> None:
        framework = self.spec.stack.frontend.framework
        template = self.registry.resolve(TemplateKind.PAGE, framework)
        for index, page in enumerate(self.spec.pages):
            element = {**page.properties, "url": page_url(page)}
            content = template.render(element, ctx, ts=self.frontend_ts)
            self._emit(
                artifact_path(ArtifactCategory.PAGE, page.name, self.ui_ext),
                content,
                ArtifactCategory.PAGE,
                f"pages[{index}] ({page.name})",
            )

    def _plan_routes(self, ctx: dict[str, Any]) -> None:
        framework = self.spec.stack.backend.framework
        template = self.registry.resolve(TemplateKind.ROUTE, framework)
        for index, route in enumerate(self.spec.routes):
            content = template.render(route.properties, ctx, ts=self.backend_ts)
            self._emit(
                artifact_path(ArtifactCategory.ROUTE, route.handler, self.server_ext),
                content,
                ArtifactCategory.ROUTE,
                f"routes[{index}] ({route.handler})",
            )

    def _plan_models(self, ctx: dict[str, Any]) -> None:
        if not self.spec.models:
            return
        orm = self.spec.stack.database.orm
        template = self.registry.resolve(TemplateKind.MODEL, orm)
        for index, model in enumerate(self.spec.models):
            content = template.render(model.properties, ctx, ts=self.backend_ts)
            self._emit(
                artifact_path(ArtifactCategory.MODEL, model.name, self.server_ext),
                content,
                ArtifactCategory.MODEL,
                f"database.models[{index}] ({model.name})",
            )

    def _plan_styling(self, ctx: dict[str, Any]) -> None:
        styling = self.spec.stack.frontend.styling
        style = ArtifactCategory.STYLE
        if styling == Styling.TAILWIND:
            self._emit(
                "tailwind.config.js", self._static("styles/tailwind.config.js.j2", ctx),
                ArtifactCategory.CONFIG, "styling",
            )
            self._emit(
                "postcss.config.js", self._static("styles/postcss.config.js.j2", ctx),
                ArtifactCategory.CONFIG, "styling",
            )
            self._emit(
                f"{CLIENT_BASE}/styles/globals.css", self._static("styles/globals.css.j2", ctx),
                style, "styling",
            )
        elif styling == Styling.CSS:
            self._emit(
                f"{CLIENT_BASE}/styles/main.css", self._static("styles/main.css.j2", ctx),
                style, "styling",
            )

    def _plan_client_entry(self, ctx: dict[str, Any]) -> None:
        frontend = self.spec.stack.frontend
        template = self.registry.resolve(TemplateKind.CLIENT_ENTRY, frontend.framework)
        jsx = frontend.framework == FrontendFramework.REACT
        entry_name = "main" + script_extension(frontend.language, jsx=jsx)
        self._emit(
            f"{CLIENT_BASE}/{entry_name}",
            template.render(None, ctx, ts=self.frontend_ts),
            ArtifactCategory.ENTRY,
            "pages",
        )
        self._emit(
            "index.html",
            self._static("project/index.html.j2", {**ctx, "client_entry": entry_name}),
            ArtifactCategory.ENTRY,
            "app",
        )

    def _plan_orm_schema(self, ctx: dict[str, Any]) -> None:
        if self.spec.stack.database.orm != Orm.PRISMA:
            return
        template = self.registry.resolve(TemplateKind.ORM_SCHEMA, Orm.PRISMA)
        self._emit(
            "prisma/schema.prisma",
            template.render(None, ctx),
            ArtifactCategory.MODEL,
            "database.models",
        )

    # -- Step 4: backend entry point -----------------------------------------

    def _plan_server_entry(self, ctx: dict[str, Any]) -> None:
        framework = self.spec.stack.backend.framework
        template = self.registry.resolve(TemplateKind.SERVER_ENTRY, framework)
        self._emit(
            f"{SERVER_BASE}/index{self.server_ext}",
            template.render(None, ctx, ts=self.backend_ts),
            ArtifactCategory.ENTRY,
            "routes",
        )

    # -- Step 5: docs & scripts ----------------------------------------------

    def _plan_docs_and_scripts(self, ctx: dict[str, Any]) -> None:
        self._emit("README.md", self._static("project/README.md.j2", ctx), ArtifactCategory.DOC, "app")
        for name in ("dev.mjs", "build.mjs"):
            self._emit(
                f"scripts/{name}",
                self._static(f"scripts/{name}.j2", ctx),
                ArtifactCategory.SCRIPT,
                "stack",
                executable=True,
            )


def plan(
    spec: Specification,
    mode: RenderMode = RenderMode.NEW,
    registry: TemplateRegistry | None = None,
) -> list[ArtifactRequest]:
    """Plan every artifact for *spec* in *mode*. See :class:`ArtifactPlanner`."""
    return ArtifactPlanner(spec, mode, registry).plan()
