"""
Package marker for shared helpers under `monitoring_dashboard.common`.
"""
