from __future__ import annotations

from typing import Callable

from brickdesk.clients.catalog import build_catalog_source
from brickdesk.core.config import get_settings
from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.commands import OrderKind
from brickdesk.workflow import OrderSubmissionWorkflow, SubmissionRegistry, build_workflow

WorkflowFactory = Callable[[OrderKind, Catalog], OrderSubmissionWorkflow]

_registry = SubmissionRegistry()


def get_catalog() -> Catalog:
    return build_catalog_source(get_settings()).load()


def get_registry() -> SubmissionRegistry:
    return _registry


def get_workflow_factory() -> WorkflowFactory:
    settings = get_settings()
    return lambda kind, catalog: build_workflow(kind, catalog, settings)
