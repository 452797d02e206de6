"""Internal constants shared across the library."""

API_BASE_URL = "https://jsonplaceholder.typicode.com"
PRODUCTS_URL = "http://127.0.0.1:3000/products"
USER_AGENT = "rxstores/aiohttp"

# ------------------------------------------------------------------
# User-facing messages
# ------------------------------------------------------------------

POLL_FAILED_MESSAGE = "Failed to fetch data"
REFRESH_FAILED_MESSAGE = "Failed to refresh data"
PAGE_FAILED_MESSAGE = "Failed to load posts"
SEARCH_FAILED_MESSAGE = "Could not fetch results. Please try again."

EMAIL_REQUIRED_MESSAGE = "Email is required"
EMAIL_INVALID_MESSAGE = "Please enter a valid email"
PASSWORD_REQUIRED_MESSAGE = "Password is required"
CONFIRM_REQUIRED_MESSAGE = "Confirm password is required"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"


def password_too_short_message(required_length: int) -> str:
    """Message for a password shorter than *required_length*."""
    return f"Password must be at least {required_length} characters"


def format_mm_ss(seconds: int) -> str:
    """Format a non-negative second count as ``MM:SS``.

    Minutes are not wrapped, so an hour renders as ``60:00``.
    """
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
