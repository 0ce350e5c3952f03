"""Specification model and loader.

Validates a declarative application specification (JSON) into frozen
pydantic models that the planner consumes.

Usage::

    from appgen.spec import load_file

    spec = load_file("specs/todo.json")
    print(spec.app.name, spec.stack.frontend.framework)
"""

from appgen.spec.loader import dump, load, load_file
from appgen.spec.models import (
    ComponentSpec,
    FieldSpec,
    ModelSpec,
    PageSpec,
    RouteSpec,
    Specification,
)

__all__ = [
    "load",
    "load_file",
    "dump",
    "Specification",
    "ComponentSpec",
    "PageSpec",
    "RouteSpec",
    "ModelSpec",
    "FieldSpec",
]
