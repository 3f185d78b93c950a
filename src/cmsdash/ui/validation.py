"""Pre-flight validation for the Streamlit UI.

No repositories; uses the API client for backend checks.
"""
from typing import List


def validate_data_dir() -> List[str]:
    """Validate data directory structure and permissions."""
    errors = []
    from cmsdash.config import settings
    data_dir = settings.data_dir

    if not data_dir.exists():
        errors.append(f"Data directory missing: {data_dir}")
        return errors

    try:
        test_file = data_dir / ".write_test"
        test_file.touch()
        test_file.unlink()
    except OSError as e:
        errors.append(f"Cannot write to data directory {data_dir}: {e}")

    return errors


def validate_image_settings() -> List[str]:
    """The image defaults must form a valid pipeline config."""
    from pydantic import ValidationError
    from cmsdash.config import settings
    try:
        settings.image_config()
    except ValidationError as e:
        return [f"Invalid IMAGE_* settings: {e.errors()[0]['msg']}"]
    return []


def validate_backend_connection() -> List[str]:
    """Validate that the FastAPI backend is reachable."""
    errors = []
    try:
        from cmsdash.ui.api_client import CMSClient
        client = CMSClient()
        client.health()
    except Exception as e:
        errors.append(f"Backend connection failed: {e}")
    return errors


def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_data_dir())
    errors.extend(validate_image_settings())
    errors.extend(validate_backend_connection())
    return errors
