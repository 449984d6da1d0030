# Response and request models for the monitoring dashboard API.
