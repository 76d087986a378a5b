"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules.  The book collection is exposed through a router defined
in ``api/v1/endpoints``; business logic lives in ``services`` and
persistence of the backing JSON document in ``core.store``.
Versioning is handled by grouping routers under the
``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
