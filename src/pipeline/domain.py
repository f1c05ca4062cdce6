"""Pipeline bounded context — donation boxes from intake review to follow-up.

Tracks each box through review, design, item research, assembly, shipping
and follow-up. Every stage is claimed by a named volunteer and later
completed; three completions recruit the next volunteer through a
solicitation notification.
"""

from protean.domain import Domain

from pipeline.utils.logging import configure_logging

configure_logging()

pipeline = Domain(name="pipeline")
