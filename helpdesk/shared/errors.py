"""
Shared error messages and configuration errors.

User-visible errors must be clear and actionable.
"""


class AppErrors:
    """Centralized actionable error messages."""

    GRID_NOT_FOUND = (
        "List view not found or expired. Reload the page and retry."
    )

    COLUMN_KEY_REQUIRED = (
        "column_key is required to start a resize."
    )

    POINTER_X_REQUIRED = (
        "pointer_x must be a number."
    )

    ROW_ID_REQUIRED = (
        "row_id is required."
    )

    TICKET_NOT_FOUND = (
        "Ticket not found. It may have been deleted; refresh the list."
    )

    TITLE_REQUIRED = (
        "Title is required."
    )

    STATUS_REQUIRED = (
        "Status is required."
    )

    NO_SELECTION = (
        "No tickets selected. Tick one or more rows first."
    )

    SELECTED_REQUIRED = (
        "selected must be true or false."
    )


class ColumnConfigError(ValueError):
    """Raised when a list view is configured with an inconsistent column set."""
