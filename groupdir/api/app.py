"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI

from groupdir.database.meta import ALL_TABLES

from .dependencies import DATABASE_MANAGER, SETTINGS, logger
from .errors import add_exception_handlers
from .groups import group_app

settings = SETTINGS()


async def lifespan(app: FastAPI):
    app.settings = settings

    if settings.create_tables:
        await DATABASE_MANAGER.create_all()
        await logger().ainfo("api.tables_created", tables=len(ALL_TABLES))

    yield

    await DATABASE_MANAGER.engine.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="Group Directory API",
    summary="Administration of the access-control groups of the cluster, and their members.",
    version=version("groupdir"),
)

app = add_exception_handlers(app)

app.include_router(group_app, prefix="/api/v2/groups")
