"""Backend/frontend scaffolding rendered from Jinja2 templates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from mashup_maker.core.errors import CodeGenerationError
from mashup_maker.generators.base import CodeScaffolder
from mashup_maker.generators.naming import (
    sanitize_file_name,
    to_component_name,
    to_data_key,
    to_env_var_name,
    to_service_name,
    unique_names,
)
from mashup_maker.models import (
    APIDescriptor, AppIdea, CodeBundle, FileNode, GeneratedProject,
)
from mashup_maker.paths import SCAFFOLD_TEMPLATES_DIR

logger = logging.getLogger(__name__)

SAMPLE_MOCK_DATA = {"message": "Sample data"}


def create_template_env(templates_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(enabled_extensions=("html.j2",), default_for_string=False),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class ScaffoldCodeGenerator(CodeScaffolder):
    """
    Renders an Express backend and a React frontend for an idea.

    Every API gets a service stub, a route entry, and a component; apikey
    and oauth APIs get a MOCK_DATA constant instead of a live call.
    """

    def __init__(self, templates_dir: Path = SCAFFOLD_TEMPLATES_DIR) -> None:
        self.env = create_template_env(templates_dir)

    def generate_project(self, idea: AppIdea) -> GeneratedProject:
        try:
            apis = self.api_context(idea.apis)
            context = {
                "app_name": idea.app_name,
                "description": idea.description,
                "features": idea.features,
                "rationale": idea.rationale,
                "package_name": sanitize_file_name(idea.app_name) or "mashup",
                "apis": apis,
                "mock_apis": [a for a in apis if a["use_mock"]],
            }
            backend = self.generate_backend(context)
            frontend = self.generate_frontend(context)
            readme = self._render("project_readme.md.j2", context)
        except Exception as e:
            logger.error("Code generation failed for %s: %s", idea.app_name, e)
            raise CodeGenerationError(
                "Failed to generate project code",
                {"appName": idea.app_name, "originalError": str(e)},
            ) from e

        logger.info(
            "Generated code for %s: %d backend files, %d frontend files",
            idea.app_name, len(backend.files), len(frontend.files),
        )
        return GeneratedProject(backend=backend, frontend=frontend, readme=readme)

    def api_context(self, apis: Sequence[APIDescriptor]) -> list[dict[str, Any]]:
        """Per-API template variables, with collision-free generated names."""
        file_names = unique_names(
            (sanitize_file_name(a.name) or "api" for a in apis),
            suffix=lambda n, i: f"{n}-{i}",
        )
        service_names = unique_names(to_service_name(a.name) or "api" for a in apis)
        component_names = unique_names(to_component_name(a.name) for a in apis)
        data_keys = unique_names(
            (to_data_key(a.name) or "api" for a in apis),
            suffix=lambda n, i: f"{n}_{i}",
        )
        return [
            {
                "name": api.name,
                "description": api.description,
                "category": api.category,
                "documentation_url": api.documentation_url,
                "base_url": api.base_url,
                "sample_endpoint": api.sample_endpoint,
                "auth_type": api.auth_type.value,
                "use_mock": api.requires_auth,
                "mock_data": api.mock_data or SAMPLE_MOCK_DATA,
                "env_var": to_env_var_name(api.name),
                "file_name": file_name,
                "service_name": service_name,
                "component_name": component_name,
                "data_key": data_key,
            }
            for api, file_name, service_name, component_name, data_key in zip(
                apis, file_names, service_names, component_names, data_keys,
            )
        ]

    def generate_backend(self, context: dict[str, Any]) -> CodeBundle:
        apis = context["apis"]
        files = {
            "src/server.js": self._render("server.js.j2", context),
            "src/routes/mashup.routes.js": self._render("routes.js.j2", context),
        }
        for api in apis:
            files[f"src/services/{api['file_name']}.service.js"] = self._render(
                "service.js.j2", {"api": api},
            )
        files.update({
            "src/utils/apiClient.js": self._render("api_client.js.j2", context),
            "package.json": self._render("backend_package.json.j2", context),
            ".env.example": self._render("backend_env.j2", context),
            ".gitignore": self._render("gitignore.j2", {"frontend": False}),
            "README.md": self._render("backend_readme.md.j2", context),
        })

        structure = FileNode.directory("backend", [
            FileNode.directory("src", [
                FileNode.directory("routes", [FileNode.file("mashup.routes.js")]),
                FileNode.directory("services", [
                    FileNode.file(f"{api['file_name']}.service.js") for api in apis
                ]),
                FileNode.directory("utils", [FileNode.file("apiClient.js")]),
                FileNode.file("server.js"),
            ]),
            FileNode.file("package.json"),
            FileNode.file(".env.example"),
        ])
        return CodeBundle(structure=structure, files=files)

    def generate_frontend(self, context: dict[str, Any]) -> CodeBundle:
        apis = context["apis"]
        files = {"src/App.jsx": self._render("App.jsx.j2", context)}
        for api in apis:
            files[f"src/components/{api['component_name']}.jsx"] = self._render(
                "component.jsx.j2", {"api": api},
            )
        files.update({
            "src/components/Dashboard.jsx": self._render("Dashboard.jsx.j2", context),
            "src/services/api.service.js": self._render("api_service.js.j2", context),
            "src/index.js": self._render("index.js.j2", context),
            "src/App.css": self._render("App.css.j2", context),
            "src/index.css": self._render("index.css.j2", context),
            "public/index.html": self._render("index.html.j2", context),
            "package.json": self._render("frontend_package.json.j2", context),
            ".env.example": self._render("frontend_env.j2", context),
            ".gitignore": self._render("gitignore.j2", {"frontend": True}),
            "README.md": self._render("frontend_readme.md.j2", context),
        })

        structure = FileNode.directory("frontend", [
            FileNode.directory("src", [
                FileNode.directory("components", [
                    *(FileNode.file(f"{api['component_name']}.jsx") for api in apis),
                    FileNode.file("Dashboard.jsx"),
                ]),
                FileNode.directory("services", [FileNode.file("api.service.js")]),
                FileNode.file("App.jsx"),
                FileNode.file("index.js"),
            ]),
            FileNode.directory("public", [FileNode.file("index.html")]),
            FileNode.file("package.json"),
            FileNode.file(".env.example"),
        ])
        return CodeBundle(structure=structure, files=files)

    def _render(self, template: str, context: dict[str, Any]) -> str:
        return self.env.get_template(template).render(**context)
