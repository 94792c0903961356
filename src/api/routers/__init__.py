# This file marks the routers package for API route modules.
# Book CRUD routes and operational health routes are registered from here by `src.api.app`.
