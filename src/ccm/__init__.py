"""ccm: a navigable map of Claude configuration files.

Layout:
    ~/.claude/                         # global scope
    ├── CLAUDE.md                      # Global memory
    ├── commands/  agents/  skills/  rules/
    └── settings.json                  # hooks + permissions
    <project>/
    ├── CLAUDE.md                      # Project memory (also .claude/CLAUDE.md)
    ├── src/CLAUDE.md                  # Nested memory
    └── .claude/
        ├── commands/  agents/  skills/  rules/
        ├── settings.json
        └── settings.local.json

Discovery walks both roots; the tree, outline, metadata and rules modules turn
what it finds into plain nested data for display.
"""
