"""
Services — Side effects at the edge of a sync cycle

- package_manager: npm / yarn commands
- confirm: safe-mode yes/no prompt
- watcher: file events, debounce, cycle triggering
"""
