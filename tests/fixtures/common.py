"""
Common/Shared Fixtures

Base factories used across test layers.
"""
import uuid


def make_user_id() -> str:
    """Generate a unique user ID"""
    return f"usr_test_{uuid.uuid4().hex[:12]}"
