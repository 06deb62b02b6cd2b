"""FastAPI application serving the GraphQL schema."""

import logging
from typing import Iterator

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from strawberry.fastapi import GraphQLRouter

from hnreader.api.schema import schema
from hnreader.scraper.client import HackerNewsClient

logger = logging.getLogger(__name__)


def get_context() -> Iterator[dict]:
    """One client per request, closed once the response is sent."""
    with HackerNewsClient() as client:
        yield {"client": client}


def create_app() -> FastAPI:
    app = FastAPI(
        title="hnreader GraphQL API",
        description="Hacker News stories and comment threads over GraphQL",
        version="0.1.0",
    )
    app.include_router(
        GraphQLRouter(schema, graphql_ide="graphiql", context_getter=get_context),
        prefix="/graphql",
    )

    @app.get("/", include_in_schema=False)
    @app.get("/graphiql", include_in_schema=False)
    async def to_graphiql() -> RedirectResponse:
        return RedirectResponse("/graphql")

    return app


def run(host: str, port: int) -> None:
    """Serve the API with uvicorn until interrupted."""
    import uvicorn

    logger.info("Listening on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port)


# Export app for uvicorn
app = create_app()
