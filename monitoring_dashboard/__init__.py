"""
Monitoring dashboard ingestion service.
It validates incoming monitoring payloads and serves dashboard statistics over HTTP.
"""
