"""Single-document parsing: heading outline and leading metadata block."""
