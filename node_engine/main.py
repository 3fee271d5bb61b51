from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from node_engine.config import settings
from node_engine.routers import behaviors, context_menu, health, navigation, nodes, render, variants
from node_engine.domain.errors import ConfigurationError, ConflictError, NotFoundError, ValidationError
from node_engine.application.event_handlers import register_event_handlers
from node_engine.dependencies import get_registry

app = FastAPI(
    title="Node Engine API",
    description="Data-driven node tree rendering, navigation and behavior dispatch",
    version=settings.VERSION,
)

# Register domain event handlers and check the registry on startup
@app.on_event("startup")
async def startup_event():
    register_event_handlers()
    get_registry().assert_configured()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


# Domain error handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc), "errors": exc.field_errors})


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})

# Include routers
app.include_router(health.router, tags=["Health"])  # Health check endpoints first
app.include_router(variants.router, tags=["Variants"])
app.include_router(nodes.router, tags=["Nodes"])
app.include_router(render.router, tags=["Render"])
app.include_router(navigation.router, tags=["Navigation"])
app.include_router(context_menu.router, tags=["Context Menu"])
app.include_router(behaviors.router, tags=["Behaviors"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Node Engine API. See /docs for API documentation"}
