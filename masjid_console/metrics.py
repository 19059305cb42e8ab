# masjid_console/metrics.py

from prometheus_client import Counter, Histogram

# Define Prometheus metrics

# Display Backend Metrics
BACKEND_REQUESTS_TOTAL = Counter('masjid_console_backend_requests_total', 'Total display backend requests', ['adapter_name', 'endpoint', 'status'])
BACKEND_REQUEST_DURATION_SECONDS = Histogram('masjid_console_backend_request_duration_seconds', 'Display backend request duration in seconds', ['adapter_name', 'endpoint'])

# Broadcast Metrics
BROADCASTS_TOTAL = Counter('masjid_console_broadcasts_total', 'Total command broadcasts', ['kind', 'outcome'])
BROADCAST_ACKS_TOTAL = Counter('masjid_console_broadcast_acks_total', 'Total client acknowledgments received', ['kind'])
BROADCAST_DURATION_SECONDS = Histogram('masjid_console_broadcast_duration_seconds', 'Time until a broadcast resolved in seconds', ['kind'])
