from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "pomotask_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "pomotask_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

PARSED_FIELDS_TOTAL = get_or_create_metric(
    "pomotask_parsed_fields_total",
    "Fields recognized by the task parser",
    Counter,
    labelnames=["field"],
)

INVALID_DATES_TOTAL = get_or_create_metric(
    "pomotask_invalid_dates_total", "Due dates rejected as not existing in the calendar", Counter
)

RECURRING_SPAWNED_TOTAL = get_or_create_metric(
    "pomotask_recurring_spawned_total", "Successor tasks created for completed recurring tasks", Counter
)
