"""
ExpertPress Server Package.

This package contains the web server implementation for ExpertPress.
It includes the API definition, output serializers and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Core configuration, constants and request dependencies.
    exception_handlers: Translation of domain errors into HTTP responses.
    serializers: Output shaping for the experts API and post gating.
"""
