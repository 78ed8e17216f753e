"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services receive
their store when constructed, so API handlers and tests can swap the
persistence backend without touching the rules.
"""
