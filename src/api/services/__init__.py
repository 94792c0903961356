# This file marks the services package for API data-access modules.
# Service modules isolate SQL from transport concerns so routers stay thin.
