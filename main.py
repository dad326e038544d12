from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from models.person import ApiRoot
from routers import people
from utils.hateoas import Hypermedia, add_hateoas, get_hypermedia

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

port = int(os.environ.get("FASTAPIPORT", 8000))


app = FastAPI(
    title=settings.APP_TITLE,
    description="FastAPI service whose responses carry HATEOAS links built from its own route table.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_hateoas(app)

# -----------------------------------------------------------------------------
# Routers to public RESTful resources
# -----------------------------------------------------------------------------

app.include_router(router=people.router)


# -----------------------------------------------------------------------------
# Root
# -----------------------------------------------------------------------------
@app.get("/", response_model=ApiRoot, response_model_exclude_none=True, name="root")
def root(hypermedia: Hypermedia = Depends(get_hypermedia)):
    document = ApiRoot(message="Welcome to the Hypermedia Links API. See /docs for OpenAPI UI.")
    return (
        hypermedia.builder(document)
        .add_current_self_link()
        .add_route_link("people", "list_people")
        .add_route_template("person", "get_person")
        .add_http_link("docs", app.docs_url, "GET")
        .build()
    )

# -----------------------------------------------------------------------------
# Entrypoint for `python main.py`
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
