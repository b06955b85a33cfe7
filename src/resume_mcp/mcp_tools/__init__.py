"""Tool handlers, one module per family of tool kinds."""
