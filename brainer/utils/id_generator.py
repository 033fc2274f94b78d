"""
ID generation utilities for Brainer.

- Batch jobs: job_xxx
"""

from uuid import uuid4


def generate_job_id() -> str:
    """
    Generate unique batch Job ID.

    Returns:
        ID in format "job_xxx" where xxx is 12 hex characters
    """
    return f"job_{uuid4().hex[:12]}"
