"""Widget ID constants.

All widget IDs used in the TUI are defined here so tests can query widgets
without depending on layout details.
"""


class WidgetIds:
    SEARCH_BOX = "search_box"
    CONTENT = "content"
    FOLDER_LIST = "folder_list"
    MODEL_TABLE = "model_table"
    LOG_PANE = "log_pane"
    STATUS_BAR = "status_bar"

    # Overlays
    HELP_OVERLAY = "help_overlay"
    HELP_BODY = "help_body"
    TENANT_PICKER = "tenant_picker"
    TENANT_LIST = "tenant_list"


__all__ = ["WidgetIds"]
