"""Core package for the widget settings editor.

Core holds the partition/merge transform, the editor lifecycle and the
concrete editors without any Textual or file-specific code, so the same
editors serve the config panel and the CLI.
"""
