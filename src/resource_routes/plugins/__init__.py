"""Plugin package for Resource Routes.

This package contains built-in registration plugins for the Registrar.

Note: Do not import concrete plugins here to keep imports side-effect free.
Concrete plugin modules (logging, filter) self-register when imported
via the main resource_routes package.
"""

__all__: list[str] = []
