"""Hook and permission rule grouping over parsed settings files."""
