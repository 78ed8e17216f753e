"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, database and errors),
``stores`` (persistence), ``services`` (business rules), ``schemas``
(request/response models) and ``api`` (versioned routers).

Run the service with::

    uvicorn user_api.app.main:app --reload
"""
