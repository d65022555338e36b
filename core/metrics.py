"""
Prometheus metrics for the activation service.

Custom metrics for the activation protocols and HTTP monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Activation metrics
activation_attempts_total = Counter(
    "activation_attempts_total",
    "Activation, revalidation and offline attempts by outcome",
    ["channel", "result"],
)

activation_attempt_log_failures_total = Counter(
    "activation_attempt_log_failures_total",
    "Attempt log writes that failed and were dropped",
)

devices_reconciled_total = Counter(
    "devices_reconciled_total",
    "Devices revoked by device limit reconciliation",
)

# License metrics
licenses_expired_total = Counter(
    "licenses_expired_total",
    "Licenses flipped from ACTIVE to EXPIRED",
    ["source"],
)

license_transitions_total = Counter(
    "license_transitions_total",
    "Administrative license status changes",
    ["operation"],
)

# Offline metrics
offline_license_files_issued_total = Counter(
    "offline_license_files_issued_total",
    "Signed offline license files issued",
)

# Voucher metrics
vouchers_redeemed_total = Counter(
    "vouchers_redeemed_total",
    "Vouchers redeemed",
)

vouchers_created_total = Counter(
    "vouchers_created_total",
    "Vouchers created by batch operations",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
