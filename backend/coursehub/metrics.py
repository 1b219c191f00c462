from __future__ import annotations

from prometheus_client import Counter

auth_login_total = Counter(
    "auth_login_total",
    "Login attempts by outcome.",
    ["outcome"],
)
auth_register_total = Counter(
    "auth_register_total",
    "Registration attempts by outcome.",
    ["outcome"],
)
course_list_requests_total = Counter(
    "course_list_requests_total",
    "Number of course listing queries served.",
)
