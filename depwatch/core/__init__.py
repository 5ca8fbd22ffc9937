"""
Core — Usage detection and manifest synchronization

- scanner: which files to look at
- parsing: extension -> tree-sitter grammar routing
- imports / analyzer: which packages a file really uses
- aggregator: project-wide union
- manifest / sync: what to install and remove
"""
