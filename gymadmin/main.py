from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter

from gymadmin.core.logging_config import setup_logging
from gymadmin.core.settings import get_app_config
from gymadmin.graphql.schema import schema
from gymadmin.graphql.context import build_context

setup_logging()
app_config = get_app_config()

app = FastAPI(debug=app_config["debug"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_config["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

graphql_app = GraphQLRouter(
    schema=schema,
    context_getter=build_context,
    graphiql=app_config["debug"]
)
app.include_router(graphql_app, prefix="/graphql")
