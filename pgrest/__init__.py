"""
pgrest - Package Initializer
============================

Configuration resolution and middleware composition for a PostgreSQL-backed
REST service.

    ┌─────────────────────────────────────┐
    │   main.create_app (FastAPI)         │  ← lifespan, routes
    ├─────────────────────────────────────┤
    │   middleware.build_middleware_stack │  ← which handlers, which order
    ├─────────────────────────────────────┤
    │   config.load_config                │  ← file / env / URL precedence
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
