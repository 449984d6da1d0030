# This file marks the routers package for API route modules.
# Route modules are grouped by concern and registered in `monitoring_dashboard.api.app`.
