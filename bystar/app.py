"""Composition root.

Wires settings, the DB pool and the dispatcher, and binds models to them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from bystar.config.logging import configure_logging
from bystar.config.settings import Settings
from bystar.db.dispatcher import PostgresDispatcher
from bystar.db.pool import create_pool
from bystar.finders import ByStarModel
from bystar.model import Model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class App:
    """Shared dependencies for bound models."""

    settings: Settings
    dispatcher: PostgresDispatcher


def create_app(settings: Settings, *, max_size: int = 10) -> App:
    """Create the application container.

    Note:
        The returned DB pool is not opened. Call `app.dispatcher.pool.open()` at startup.
    """

    configure_logging(settings.log_level)
    pool = create_pool(settings.database_url, max_size=max_size)
    return App(settings=settings, dispatcher=PostgresDispatcher(pool))


def bind_models(app: App, models: Iterable[type[Model]]) -> None:
    """Point `models` at the app dispatcher and apply finder settings."""

    for model in models:
        model.dispatcher = app.dispatcher
        if issubclass(model, ByStarModel):
            model.default_field = app.settings.default_field
            model.languages = app.settings.language_list
        logger.debug("bound model=%s table=%s", model.__name__, model.__tablename__)
