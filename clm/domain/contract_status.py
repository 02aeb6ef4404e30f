"""Contract status values the application itself relies on.

Any other string may be stored through an update; only termination is
driven by the application (soft delete).
"""

DRAFT = "draft"
ACTIVE = "active"
TERMINATED = "terminated"
