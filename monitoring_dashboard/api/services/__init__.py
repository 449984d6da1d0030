# This file marks the services package for API business logic modules.
# Routers depend on service classes so transport concerns stay out of the monitoring logic.
