# HTTP layer for the monitoring dashboard: app factory, routers, schemas, and services.
