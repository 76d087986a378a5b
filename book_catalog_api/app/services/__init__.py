"""
Service layer abstraction.

Each service encapsulates business logic for a resource.  Handlers in
the API layer only translate service results into HTTP responses, so
the JSON document store can be swapped for another backend without
changing them.
"""
