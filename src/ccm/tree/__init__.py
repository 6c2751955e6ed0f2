"""Folder/file tree assembly for discovered configuration items."""
